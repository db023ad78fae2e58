import unittest
from gesture_mirror.core import geometry
from gesture_mirror.core.types import Point2D, Rect

class TestGeometry(unittest.TestCase):
    def test_contains_is_inclusive(self):
        r = Rect(10, 10, 20, 20)
        self.assertTrue(geometry.contains(r, Point2D(10, 20)))
        self.assertTrue(geometry.contains(r, Point2D(15, 15)))
        self.assertFalse(geometry.contains(r, Point2D(20.5, 15)))

    def test_expand(self):
        r = geometry.expand(Rect(10, 10, 20, 20), 24)
        self.assertEqual(r, Rect(-14, -14, 44, 44))
        self.assertTrue(geometry.contains(r, Point2D(43, -13)))

    def test_rect_from_center(self):
        r = Rect.from_center(Point2D(100, 100), 120, 80)
        self.assertEqual((r.left, r.top, r.right, r.bottom), (40, 60, 160, 140))
        self.assertEqual(r.center, Point2D(100, 100))

    def test_snap_to_grid_rounds_half_up(self):
        self.assertEqual(geometry.snap_to_grid(212, 16), 208)
        self.assertEqual(geometry.snap_to_grid(8, 16), 16)
        self.assertEqual(geometry.snap_to_grid(-8, 16), 0)
        self.assertEqual(geometry.snap_to_grid(-9, 16), -16)

if __name__ == '__main__':
    unittest.main()
