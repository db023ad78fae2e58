import unittest
import numpy as np
import cv2
from gesture_mirror.control.capture_surface import CaptureError, CaptureSurface

class TestCaptureSurface(unittest.TestCase):
    def setUp(self):
        self.surface = CaptureSurface(width=64, height=32, mirror=True, quality=90)

    def _two_tone(self):
        """Left half pure blue, right half pure red (BGR)."""
        frame = np.zeros((100, 200, 3), dtype=np.uint8)
        frame[:, :100] = (255, 0, 0)
        frame[:, 100:] = (0, 0, 255)
        return frame

    def test_no_frame_raises(self):
        with self.assertRaises(CaptureError):
            self.surface.capture()

    def test_returns_jpeg(self):
        self.surface.update(self._two_tone())
        payload = self.surface()
        self.assertIsInstance(payload, bytes)
        self.assertTrue(payload.startswith(b"\xff\xd8"))

    def test_mirrors_like_the_display(self):
        self.surface.update(self._two_tone())
        image = cv2.imdecode(np.frombuffer(self.surface.capture(), np.uint8), cv2.IMREAD_COLOR)
        self.assertEqual(image.shape, (32, 64, 3))

        left = image[16, 8].astype(int)
        right = image[16, 56].astype(int)
        self.assertGreater(left[2], 200)   # red now on the left
        self.assertLess(left[0], 60)
        self.assertGreater(right[0], 200)  # blue on the right

    def test_grayscale_frame(self):
        self.surface.update(np.full((50, 50), 128, dtype=np.uint8))
        image = cv2.imdecode(np.frombuffer(self.surface.capture(), np.uint8), cv2.IMREAD_COLOR)
        self.assertEqual(image.shape, (32, 64, 3))

if __name__ == '__main__':
    unittest.main()
