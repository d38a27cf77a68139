"""Tests for the two-surface comparison workflow."""

import pytest


def press(pair, side, samples):
    """Run a tap gesture on one side of the pair."""
    pair.handle(side, "start", samples)
    return pair.handle(side, "end")


class TestStampPair:
    """Tests for StampPair."""

    def test_right_stamp_triggers_comparison(self, default_config, sample):
        """Test that completing the right stamp compares with the left."""
        from stampmatch.pairing import StampPair

        pair = StampPair("circle", default_config)
        assert press(pair, "left", [sample(60, 60)]) is None

        result = press(pair, "right", [sample(60, 60)])

        assert result is not None
        assert result.similarity == 100.0
        assert result.is_match

    def test_right_without_left_has_no_result(self, default_config, sample):
        from stampmatch.pairing import StampPair

        pair = StampPair("circle", default_config)

        assert press(pair, "right", [sample(60, 60)]) is None
        assert pair.right_buffer is not None

    def test_new_left_stamp_drops_result(self, default_config, sample):
        from stampmatch.pairing import StampPair

        pair = StampPair("square", default_config)
        press(pair, "left", [sample(60, 60)])
        press(pair, "right", [sample(60, 60)])
        assert pair.result is not None

        press(pair, "left", [sample(30, 30)])

        assert pair.result is None

    def test_offset_stamps_do_not_match_strictly(self, default_config, sample):
        """Test that shifted stamps lose similarity through half matches."""
        from stampmatch.pairing import StampPair

        pair = StampPair("square", default_config)
        pair.set_tolerance(0.0)
        press(pair, "left", [sample(40, 40)])
        result = press(pair, "right", [sample(80, 80)])

        assert result.similarity < 100.0
        assert not result.is_match
        # two disjoint 30x30 squares: 1800 half matches
        assert result.matching_pixels == pytest.approx(120 * 120 - 1800 + 900)

    def test_manual_compare_requires_content(self, default_config, sample):
        from stampmatch.pairing import StampPair

        pair = StampPair("freehand", default_config)
        press(pair, "left", [sample(10, 10)])
        press(pair, "right", [sample(10, 10)])

        # a freehand tap draws nothing
        assert pair.compare() is None

    def test_manual_compare_uses_current_tolerance(self, default_config, sample):
        from stampmatch.pairing import StampPair

        pair = StampPair("circle", default_config)
        press(pair, "left", [sample(60, 60)])
        press(pair, "right", [sample(62, 60)])

        pair.set_tolerance(0.0)
        strict = pair.compare()
        pair.set_tolerance(0.5)
        lenient = pair.compare()

        assert not strict.is_match
        assert lenient.is_match
        assert lenient.tolerance == 0.5

    def test_tolerance_clamped_to_ui_range(self, default_config):
        from stampmatch.pairing import StampPair

        pair = StampPair(config=default_config)

        assert pair.tolerance == pytest.approx(0.3)
        assert pair.set_tolerance(0.95) == pytest.approx(0.8)
        assert pair.set_tolerance(-1) == 0.0

    def test_reset_clears_everything(self, default_config, sample):
        from stampmatch.pairing import StampPair

        pair = StampPair("circle", default_config)
        press(pair, "left", [sample(60, 60)])
        press(pair, "right", [sample(60, 60)])

        pair.reset()

        assert pair.left_buffer is None
        assert pair.right_buffer is None
        assert pair.result is None
        assert not pair.left.has_content
        assert not pair.right.has_content

    def test_set_mode_applies_to_both(self, default_config):
        from stampmatch.models import CaptureMode
        from stampmatch.pairing import StampPair

        pair = StampPair("circle", default_config)
        pair.set_mode("freehand")

        assert pair.left.mode == CaptureMode.FREEHAND
        assert pair.right.mode == CaptureMode.FREEHAND

    def test_mode_change_waits_for_next_gesture(self, default_config, sample):
        """Test that switching mode mid-gesture leaves the live gesture alone."""
        from stampmatch.capture.surface import StampSurface
        from stampmatch.models import CaptureMode
        from stampmatch.pairing import StampPair

        pair = StampPair("auto", default_config)
        pair.handle("left", "start", [sample(30, 30)])
        pair.handle("left", "move", [sample(90, 30)])
        pair.set_mode("freehand")
        pair.handle("left", "move", [sample(90, 90)])
        pair.handle("left", "move", [sample(30, 90)])
        pair.handle("left", "end")

        expected = StampSurface("auto", default_config)
        expected.handle("start", [sample(30, 30)])
        for s in [sample(90, 30), sample(90, 90), sample(30, 90)]:
            expected.handle("move", [s])

        assert pair.left.session.mode == CaptureMode.AUTO
        assert pair.left_buffer == expected.handle("end")
        assert pair.left_buffer.pixels[35, 35, 3] == 255
        assert pair.left.mode == CaptureMode.FREEHAND
