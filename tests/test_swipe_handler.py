import unittest
import numpy as np
from gesture_mirror.config import CONFIG
from gesture_mirror.control.controller import MirrorController
from gesture_mirror.core.types import Mode, Rect

W, H = CONFIG["DISPLAY_WIDTH"], CONFIG["DISPLAY_HEIGHT"]

def hand_at(mx, my=0.5, pinch=False):
    """Open hand whose index tip sits at mirrored display coords (mx, my)."""
    ix, iy = 1.0 - mx, my
    lms = np.zeros((21, 3))
    lms[:, :2] = (ix, iy + 0.1)
    lms[0, :2] = (ix, iy + 0.25)
    lms[9, :2] = (ix, iy + 0.15)
    lms[8, :2] = (ix, iy)
    lms[4, :2] = (ix + (0.02 if pinch else 0.2), iy)
    return lms

class TestSwipeHandler(unittest.TestCase):
    def setUp(self):
        self.pilot = MirrorController(config=dict(CONFIG))
        self.state = self.pilot.state
        self.sink = self.pilot.sink

    def _play(self, xs, t0, dt=0.1, pinch=False):
        for i, x in enumerate(xs):
            self.pilot.process([hand_at(x, pinch=pinch)], now=t0 + i * dt)

    def test_left_to_right_enters_try_on(self):
        self._play([0.40, 0.45, 0.50, 0.55], t0=0.0)
        self.assertEqual(self.state.mode, Mode.MIRROR)

        self.pilot.process([hand_at(0.65)], now=0.4)
        self.assertEqual(self.state.mode, Mode.TRY_ON)
        self.assertEqual(self.sink.mode, Mode.TRY_ON)
        self.assertEqual(self.state.last_swipe, 0.4)
        self.assertEqual(self.state.swipe_trackers, {})

    def test_cooldown_then_swipe_back(self):
        self._play([0.40, 0.45, 0.50, 0.55, 0.65], t0=0.0)
        self.assertEqual(self.state.mode, Mode.TRY_ON)

        # Valid right-to-left swipe, but still inside the 0.9s cooldown
        self._play([0.65, 0.55, 0.45, 0.35], t0=0.5)
        self.assertEqual(self.state.mode, Mode.TRY_ON)

        self._play([0.65, 0.50, 0.35], t0=2.0)
        self.assertEqual(self.state.mode, Mode.MIRROR)

    def test_wrong_direction_is_ignored(self):
        """Mirror only leaves on a left-to-right swipe."""
        self._play([0.65, 0.55, 0.45, 0.35], t0=0.0)
        self.assertEqual(self.state.mode, Mode.MIRROR)

    def test_too_slow_is_not_a_swipe(self):
        """Same distance spread over more than the 0.6s window."""
        self._play([0.40, 0.45, 0.50, 0.55, 0.60, 0.65], t0=0.0, dt=0.2)
        self.assertEqual(self.state.mode, Mode.MIRROR)

    def test_slow_drift_never_triggers(self):
        """0.1 of travel over 2s never fits 0.18 inside the 0.6s window."""
        xs = [0.30 + 0.1 * i / 120 for i in range(121)]
        self._play(xs, t0=0.0, dt=1 / 60)
        self.assertEqual(self.state.mode, Mode.MIRROR)

    def test_swipe_fires_at_any_frame_rate(self):
        """dx 0.25 over 400ms switches whether frames are coarse or fine."""
        for fps in (30, 60, 120):
            with self.subTest(fps=fps):
                pilot = MirrorController(config=dict(CONFIG))
                frames = int(round(0.4 * fps))
                for i in range(frames + 1):
                    pilot.process([hand_at(0.40 + 0.25 * i / frames)], now=i / fps)
                self.assertEqual(pilot.state.mode, Mode.TRY_ON)

    def test_resting_hand_reanchors_then_swipes(self):
        """Jitter below epsilon is rest: the baseline follows it, then a swipe still fires."""
        fps = 60
        for i in range(fps):
            jitter = 0.004 if i % 2 == 0 else -0.004
            self.pilot.process([hand_at(0.40 + jitter)], now=i / fps)
        self.assertEqual(self.state.mode, Mode.MIRROR)
        self.assertGreater(self.state.swipe_trackers[0].start_time, 0.5)

        for i in range(25):
            self.pilot.process([hand_at(0.40 + 0.25 * i / 24)], now=(fps + i) / fps)
        self.assertEqual(self.state.mode, Mode.TRY_ON)

    def test_drag_blocks_swipe(self):
        self.pilot.set_edit_mode(True, now=0.0)
        self.pilot.add_widget("Backdrop", Rect(0, 0, W, H))

        self._play([0.40, 0.45, 0.50, 0.55, 0.65], t0=1.0, pinch=True)
        self.assertTrue(self.state.is_dragging)
        self.pilot.process([hand_at(0.65)], now=1.5)

        self.assertEqual(self.state.mode, Mode.MIRROR)
        self.assertFalse(self.state.session.active)

    def test_idle_pinch_blocks_swipe(self):
        """Any pinch session blocks swipes, even one with no target."""
        self._play([0.40, 0.45, 0.50, 0.55, 0.65], t0=1.0, pinch=True)
        self.assertEqual(self.state.mode, Mode.MIRROR)

    def test_entering_try_on_locks_editing(self):
        self.pilot.set_edit_mode(True, now=0.0)
        self._play([0.40, 0.45, 0.50, 0.55, 0.65], t0=2.0)
        self.assertEqual(self.state.mode, Mode.TRY_ON)
        self.assertFalse(self.state.edit_mode)
        self.assertFalse(self.sink.edit_mode)

    def test_lost_hand_drops_its_tracker(self):
        self.pilot.process([hand_at(0.4), hand_at(0.8)], now=0.0)
        self.assertEqual(set(self.state.swipe_trackers), {0, 1})
        self.pilot.process([hand_at(0.4)], now=0.1)
        self.assertEqual(set(self.state.swipe_trackers), {0})
        self.pilot.process([], now=0.2)
        self.assertEqual(self.state.swipe_trackers, {})

if __name__ == '__main__':
    unittest.main()
