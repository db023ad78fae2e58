import unittest
from gesture_mirror.config import CONFIG
from gesture_mirror.control.layout import LayoutEngine
from gesture_mirror.control.render_sink import RecordingRenderSink
from gesture_mirror.core.state_manager import EngineState
from gesture_mirror.core.types import Action, Mode, ORIGIN, Point2D, Rect, Transition

class TestLayoutEngine(unittest.TestCase):
    def setUp(self):
        self.config = dict(CONFIG)
        self.sink = RecordingRenderSink()
        self.state = EngineState(self.config)
        self.layout = LayoutEngine(self.sink, self.config)
        self.state.edit_mode = True

    def test_set_position_requires_edit_mode(self):
        self.layout.add_widget(self.state, "A", Rect.from_center(Point2D(100, 100), 120, 80))
        self.state.edit_mode = False
        self.assertFalse(self.layout.set_position(self.state, "A", 300, 300))
        self.assertEqual(self.state.widgets["A"].offset, ORIGIN)

    def test_set_position_unknown_widget(self):
        self.assertFalse(self.layout.set_position(self.state, "ghost", 1, 1))

    def test_set_position_tracks_center(self):
        """center = base + offset after every move."""
        self.layout.add_widget(self.state, "A", Rect.from_center(Point2D(100, 100), 120, 80))
        self.layout.set_position(self.state, "A", 250, 130)
        widget = self.state.widgets["A"]
        self.assertEqual(widget.offset, Point2D(150, 30))
        self.assertEqual(widget.center, Point2D(250, 130))
        self.assertEqual(self.sink.transitions["A"], Transition.DRAG)

    def test_snap_aligns_left_edge_then_grid(self):
        """A dragged to (250,100); B's left edge at 252 -> align then round to 16px."""
        self.layout.add_widget(self.state, "A", Rect.from_center(Point2D(100, 100), 120, 80))
        self.layout.add_widget(self.state, "B", Rect(252, 360, 452, 440))
        self.layout.set_position(self.state, "A", 250, 100)

        offset = self.layout.snap(self.state, "A", now=0.0)

        # 150 + (252 - 190) = 212 -> 208
        self.assertEqual(offset, Point2D(208, 0))
        self.assertEqual(self.sink.offsets["A"], Point2D(208, 0))
        self.assertEqual(self.sink.transitions["A"], Transition.SNAP)

    def test_snap_without_candidates_still_quantizes(self):
        self.layout.add_widget(self.state, "A", Rect.from_center(Point2D(100, 100), 100, 100))
        self.layout.add_widget(self.state, "B", Rect(900, 600, 1000, 700))
        self.layout.set_position(self.state, "A", 137, 91)

        offset = self.layout.snap(self.state, "A", now=0.0)

        self.assertEqual(offset, Point2D(32, -16))

    def test_snap_never_exceeds_tolerance(self):
        """Whatever the sibling layout, alignment moves at most ALIGN_THRESHOLD_PX per axis."""
        tolerance = self.config["ALIGN_THRESHOLD_PX"]
        unit = self.config["SNAP_SIZE_PX"]
        for sibling_left in (150, 289, 330, 331, 500, 900):
            state = EngineState(self.config)
            state.edit_mode = True
            self.layout.add_widget(state, "A", Rect.from_center(Point2D(100, 100), 120, 80))
            self.layout.add_widget(state, "B", Rect(sibling_left, 500, sibling_left + 40, 540))
            self.layout.set_position(state, "A", 250, 100)
            before = state.widgets["A"].offset.x

            offset = self.layout.snap(state, "A", now=0.0)

            self.assertLessEqual(abs(offset.x - before), tolerance + unit / 2)
            self.assertEqual(offset.x % unit, 0)
            self.assertEqual(offset.y % unit, 0)

    def test_snap_prefers_closest_candidate(self):
        self.layout.add_widget(self.state, "A", Rect.from_center(Point2D(100, 100), 100, 100))
        self.layout.add_widget(self.state, "far", Rect(300, 100, 400, 200))
        self.layout.add_widget(self.state, "near", Rect(196, 600, 296, 700))
        # A left edge at 50 + 144 = 194: 'near' is 2px away, 'far' is 106px away
        self.layout.set_position(self.state, "A", 244, 400)
        offset = self.layout.snap(self.state, "A", now=0.0)
        self.assertEqual(offset.x, 144)  # 146 rounded to the grid

    def test_transition_clear_timer(self):
        self.layout.add_widget(self.state, "A", Rect.from_center(Point2D(100, 100), 120, 80))
        self.layout.snap(self.state, "A", now=1.0)
        self.state.timers.run_due(1.1)
        self.assertEqual(self.sink.transitions["A"], Transition.SNAP)
        self.state.timers.run_due(1.3)
        self.assertEqual(self.sink.transitions["A"], Transition.NONE)
        self.assertIsNone(self.state.transition_timer)

    def test_init_widget_state_preserves_offset(self):
        """Viewport resize moves the anchor, not the user's offset."""
        self.layout.add_widget(self.state, "A", Rect.from_center(Point2D(100, 100), 120, 80))
        self.layout.set_position(self.state, "A", 150, 120)

        # Renderer reports A (offset included) after the page reflowed by +40px
        rendered = {"A": Rect.from_center(Point2D(190, 120), 120, 80)}
        self.layout.init_widget_state(self.state, rendered)

        widget = self.state.widgets["A"]
        self.assertEqual(widget.offset, Point2D(50, 20))
        self.assertEqual(widget.base_center, Point2D(140, 100))
        self.assertEqual(widget.center, Point2D(190, 120))

    def test_reset_discards_offsets(self):
        self.layout.add_widget(self.state, "A", Rect.from_center(Point2D(100, 100), 120, 80))
        self.layout.add_widget(self.state, "B", Rect.from_center(Point2D(400, 100), 120, 80))
        self.layout.set_position(self.state, "A", 300, 300)
        self.layout.set_position(self.state, "B", 10, 10)

        self.layout.reset(self.state, now=0.0)

        for wid in ("A", "B"):
            self.assertEqual(self.state.widgets[wid].offset, ORIGIN)
            self.assertEqual(self.sink.transitions[wid], Transition.SMOOTH)
        self.assertEqual(self.state.widgets["A"].center, Point2D(100, 100))

        self.state.timers.run_due(0.2)
        self.assertEqual(self.sink.transitions["A"], Transition.NONE)

    def test_button_hit_margin(self):
        self.layout.add_button(self.state, Action.RESET, Rect(100, 100, 200, 140))
        self.assertIsNotNone(self.layout.hit_test_buttons(self.state, Point2D(224, 164)))
        self.assertIsNone(self.layout.hit_test_buttons(self.state, Point2D(225, 120)))

    def test_hidden_or_disabled_buttons_are_skipped(self):
        self.layout.add_button(self.state, Action.SHUTTER, Rect(100, 100, 200, 140), modes=[Mode.TRY_ON])
        self.assertIsNone(self.layout.hit_test_buttons(self.state, Point2D(150, 120)))

        self.state.mode = Mode.TRY_ON
        self.assertIsNotNone(self.layout.hit_test_buttons(self.state, Point2D(150, 120)))

        self.layout.set_button_enabled(self.state, Action.SHUTTER, False)
        self.assertIsNone(self.layout.hit_test_buttons(self.state, Point2D(150, 120)))

    def test_widget_hit_has_no_margin_and_topmost_wins(self):
        self.layout.add_widget(self.state, "under", Rect(0, 0, 200, 200))
        self.layout.add_widget(self.state, "over", Rect(100, 100, 300, 300))
        self.assertEqual(self.layout.widget_under_point(self.state, Point2D(150, 150)), "over")
        self.assertEqual(self.layout.widget_under_point(self.state, Point2D(50, 50)), "under")
        self.assertIsNone(self.layout.widget_under_point(self.state, Point2D(301, 150)))

    def test_move_button(self):
        self.layout.add_button(self.state, Action.SHUTTER, Rect(0, 0, 100, 50))
        self.layout.move_button(self.state, Action.SHUTTER, Rect(300, 300, 400, 350))
        self.assertIsNone(self.layout.hit_test_buttons(self.state, Point2D(50, 25)))
        self.assertEqual(self.layout.hit_test_buttons(self.state, Point2D(350, 325)).action, Action.SHUTTER)

if __name__ == '__main__':
    unittest.main()
