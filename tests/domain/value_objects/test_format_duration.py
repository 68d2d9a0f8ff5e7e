import pytest

from phase_timeline.domain.value_objects.timing import (ActivePhaseView,
                                                        RenderedView,
                                                        format_duration)


class TestFormatDuration:
    """Precision drops from 2 decimals to 1 to none as durations grow."""

    @pytest.mark.parametrize(
        "elapsed_ms, expected",
        [
            (0.0, "0.00"),
            (230.0, "0.23"),
            (999.999, "1.00"),
            (1000.0, "1.0"),
            (3400.0, "3.4"),
            (9999.9, "10.0"),
            (10000.0, "10"),
            (14999.0, "14"),
            (125900.0, "125"),
        ],
    )
    def test_format_duration(self, elapsed_ms, expected):
        assert format_duration(elapsed_ms) == expected

    def test_boundaries_switch_precision(self):
        assert len(format_duration(999.999).split(".")[1]) == 2
        assert len(format_duration(1000.0).split(".")[1]) == 1
        assert len(format_duration(9999.9).split(".")[1]) == 1
        assert "." not in format_duration(10000.0)


class TestRenderedView:
    def test_idle_view(self):
        view = RenderedView(elapsed="0.00", elapsed_ms=0.0)
        assert view.is_idle
        assert view.to_dict()["in_progress"] == []

    def test_view_with_running_phase_is_not_idle(self):
        view = RenderedView(
            elapsed="0.10",
            elapsed_ms=100.0,
            in_progress=(ActivePhaseView("parse", "0.05", 50.0),),
        )
        assert not view.is_idle
        assert view.to_dict()["in_progress"][0] == {
            "name": "parse",
            "formatted_elapsed": "0.05",
            "elapsed_ms": 50.0,
            "in_progress": True,
        }
