import unittest
from unittest import mock
import numpy as np
from gesture_mirror.config import CONFIG
from gesture_mirror.control.controller import MirrorController
from gesture_mirror.core.types import Action, Point2D, Rect
from gesture_mirror.main import ThreadedCamera, build_layout, card_rects, relayout

class FakeCapture:
    """Stands in for cv2.VideoCapture: plays a fixed list of frames, then fails."""
    def __init__(self, frames):
        self.frames = list(frames)
        self.released = False

    def isOpened(self):
        return True

    def set(self, prop, value):
        return True

    def read(self):
        if not self.frames:
            return False, None
        return True, self.frames.pop(0)

    def release(self):
        self.released = True

class TestThreadedCamera(unittest.TestCase):
    def _camera(self, frames, size=(64, 48)):
        capture = FakeCapture(frames)
        with mock.patch("gesture_mirror.main.cv2.VideoCapture", return_value=capture):
            cam = ThreadedCamera(0, size)
        cam.thread.join(timeout=2.0)
        return cam, capture

    def test_frames_are_scaled_and_stamped(self):
        frames = [np.full((120, 160, 3), i, dtype=np.uint8) for i in range(3)]
        cam, _ = self._camera(frames)

        frame, stamp = cam.read()
        self.assertEqual(frame.shape, (48, 64, 3))
        self.assertEqual(frame[0, 0, 0], 2)
        self.assertIsInstance(stamp, float)

    def test_stream_end_is_reported(self):
        """A read failure stops the reader and leaves a reason for the loop."""
        cam, _ = self._camera([np.zeros((120, 160, 3), dtype=np.uint8)])
        self.assertFalse(cam.running)
        self.assertEqual(cam.failure, "camera stream ended")

    def test_no_frame_yet(self):
        cam, capture = self._camera([])
        self.assertEqual(cam.read(), (None, None))
        cam.release()
        self.assertTrue(capture.released)

    def test_closed_device_raises(self):
        closed = mock.Mock()
        closed.isOpened.return_value = False
        with mock.patch("gesture_mirror.main.cv2.VideoCapture", return_value=closed):
            with self.assertRaises(IOError):
                ThreadedCamera(3, (64, 48))

class TestRelayout(unittest.TestCase):
    def assertPointAlmostEqual(self, a, b):
        self.assertAlmostEqual(a.x, b.x)
        self.assertAlmostEqual(a.y, b.y)

    def test_resize_keeps_user_offsets(self):
        w, h = CONFIG["DISPLAY_WIDTH"], CONFIG["DISPLAY_HEIGHT"]
        pilot = MirrorController(config=dict(CONFIG))
        build_layout(pilot, w, h)
        pilot.set_edit_mode(True, now=0.0)
        clock = pilot.state.widgets["Clock"]
        pilot.layout.set_position(pilot.state, "Clock", clock.center.x + 40, clock.center.y + 20)

        relayout(pilot, 640, 360)

        self.assertEqual(pilot.state.display, Rect(0, 0, 640, 360))
        self.assertPointAlmostEqual(clock.offset, Point2D(40, 20))
        self.assertPointAlmostEqual(clock.base_center, card_rects(640, 360)["Clock"].center)
        self.assertAlmostEqual(clock.width, card_rects(640, 360)["Clock"].width)
        self.assertPointAlmostEqual(pilot.state.widgets["News"].center, card_rects(640, 360)["News"].center)

        shutter = next(b for b in pilot.state.buttons if b.action == Action.SHUTTER)
        self.assertEqual(shutter.rect.bottom, 360 - 70 + 44)

if __name__ == '__main__':
    unittest.main()
