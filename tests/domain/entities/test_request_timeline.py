import re

import pytest

from phase_timeline.domain.entities.request_timeline import RequestTimeline


class TestStartAndStop:
    """Unit tests for phase start/stop bookkeeping."""

    def test_stop_before_start_returns_none_and_changes_nothing(self, timeline):
        """
        GIVEN a fresh timeline
        WHEN a phase that was never started is stopped
        THEN None is returned and no state changes.
        """
        assert timeline.stop_clock("fetch") is None
        assert dict(timeline.active_phases) == {}
        assert dict(timeline.completed_phases) == {}

    def test_start_returns_true_then_false_while_running(self, timeline):
        assert timeline.start_clock("fetch") is True
        assert timeline.start_clock("fetch") is False
        assert timeline.is_running("fetch")

    def test_second_start_does_not_reset_start_instant(self, timeline, clock):
        """
        GIVEN a phase started at t=0
        WHEN it is started again at t=50 and stopped at t=200
        THEN the duration is measured from the first start.
        """
        timeline.start_clock("fetch")
        clock.advance(50)
        timeline.start_clock("fetch")
        clock.advance(150)

        duration = timeline.stop_clock("fetch")

        assert duration == pytest.approx(200.0)

    def test_stop_moves_phase_from_active_to_completed(self, timeline, clock):
        clock.advance(30)
        timeline.start_clock("parse")
        clock.advance(70)

        duration = timeline.stop_clock("parse")

        assert duration == pytest.approx(70.0)
        assert not timeline.is_running("parse")
        assert timeline.is_completed("parse")
        record = timeline.completed_phases["parse"]
        assert record.duration_ms == pytest.approx(70.0)
        assert record.start_offset_ms == pytest.approx(30.0)

    def test_double_stop_returns_none_second_time(self, timeline, clock):
        timeline.start_clock("parse")
        clock.advance(10)
        assert timeline.stop_clock("parse") == pytest.approx(10.0)
        assert timeline.stop_clock("parse") is None
        assert timeline.completed_phases["parse"].duration_ms == pytest.approx(10.0)

    def test_name_never_in_both_maps_after_stop(self, timeline, clock):
        for _ in range(3):
            timeline.start_clock("x")
            clock.advance(5)
            timeline.stop_clock("x")
            assert not ("x" in timeline.active_phases and "x" in timeline.completed_phases)

    def test_restart_keeps_previous_record_until_stopped_again(self, timeline, clock):
        """
        GIVEN a completed phase
        WHEN it is restarted and stopped again
        THEN the record is overwritten and keeps its original position.
        """
        timeline.start_clock("a")
        clock.advance(10)
        timeline.stop_clock("a")
        timeline.start_clock("b")
        clock.advance(10)
        timeline.stop_clock("b")

        timeline.start_clock("a")
        assert timeline.completed_phases["a"].duration_ms == pytest.approx(10.0)
        clock.advance(40)
        timeline.stop_clock("a")

        assert list(timeline.completed_phases) == ["a", "b"]
        assert timeline.completed_phases["a"].duration_ms == pytest.approx(40.0)
        assert timeline.completed_phases["a"].start_offset_ms == pytest.approx(20.0)

    def test_any_call_sequence_never_raises(self, timeline, clock):
        names = ["a", "b", "a", "", "c", "b", "a"]
        for i, name in enumerate(names):
            clock.advance(i)
            timeline.stop_clock(name)
            timeline.start_clock(name)
            timeline.start_clock(name)
            timeline.render_display()
            timeline.render_timing_header()
            timeline.render_summary_text()
        assert timeline.has_active()


class TestTotalElapsed:
    def test_total_elapsed_tracks_clock(self, timeline, clock):
        assert timeline.total_elapsed() == pytest.approx(0.0)
        clock.advance(250)
        assert timeline.total_elapsed() == pytest.approx(250.0)

    def test_total_elapsed_is_non_decreasing_with_real_clock(self):
        timeline = RequestTimeline()
        readings = [timeline.total_elapsed() for _ in range(100)]
        assert readings == sorted(readings)
        assert readings[0] >= 0.0

    def test_origin_is_fixed(self, timeline, clock):
        origin = timeline.origin
        clock.advance(1000)
        timeline.start_clock("x")
        assert timeline.origin == origin


class TestRendering:
    """Unit tests for the text, header and view renderings."""

    def test_example_scenario(self, timeline, clock):
        """
        GIVEN a timeline created at t=0 and "fetch" started at t=0
        WHEN "fetch" is stopped at t=120
        THEN the summary and header report it as 0.12s / 120.00ms.
        """
        timeline.start_clock("fetch")
        clock.advance(120)

        assert timeline.stop_clock("fetch") == pytest.approx(120.0)

        summary = timeline.render_summary_text()
        assert "fetch: 0.12s (started at +0.00s)" in summary.splitlines()
        assert timeline.render_timing_header() == "fetch;dur=120.00"

    def test_summary_lists_completed_in_insertion_order(self, timeline, clock):
        timeline.start_clock("slow")
        timeline.start_clock("fast")
        clock.advance(50)
        timeline.stop_clock("fast")
        clock.advance(1950)
        timeline.stop_clock("slow")
        timeline.start_clock("pending")

        lines = timeline.render_summary_text().splitlines()

        assert lines[0] == "Timeline (2.0s total):"
        assert lines[1] == "fast: 0.05s (started at +0.00s)"
        assert lines[2] == "slow: 2.0s (started at +0.00s)"
        assert len(lines) == 3
        assert "pending" not in timeline.render_summary_text()

    def test_str_is_summary_text(self, timeline, clock):
        timeline.start_clock("x")
        clock.advance(1)
        timeline.stop_clock("x")
        assert str(timeline) == timeline.render_summary_text()

    def test_round_trip_duration_appears_in_summary(self):
        timeline = RequestTimeline()
        timeline.start_clock("x")
        duration = timeline.stop_clock("x")

        assert duration is not None and duration >= 0.0
        match = re.search(r"^x: (\d+\.\d{2})s", timeline.render_summary_text(), re.M)
        assert match is not None
        assert float(match.group(1)) == pytest.approx(duration / 1000, abs=0.01)

    def test_timing_header_grammar(self, timeline, clock):
        timeline.start_clock("db")
        clock.advance(1.234)
        timeline.stop_clock("db")
        timeline.start_clock("render")
        clock.advance(15000)
        timeline.stop_clock("render")

        header = timeline.render_timing_header()

        assert header == "db;dur=1.23,render;dur=15000.00"
        assert re.fullmatch(r"[^,;]+;dur=\d+\.\d{2}(,[^,;]+;dur=\d+\.\d{2})*", header)

    def test_timing_header_is_empty_without_completed_phases(self, timeline):
        timeline.start_clock("running")
        assert timeline.render_timing_header() == ""

    def test_timing_header_excludes_only_restarted_names(self, timeline, clock):
        """
        GIVEN two completed phases
        WHEN one of them is restarted
        THEN only the restarted one leaves the header until it stops again.
        """
        for name in ("a", "b"):
            timeline.start_clock(name)
            clock.advance(10)
            timeline.stop_clock(name)

        timeline.start_clock("a")
        assert timeline.render_timing_header() == "b;dur=10.00"

        clock.advance(30)
        timeline.stop_clock("a")
        assert timeline.render_timing_header() == "a;dur=30.00,b;dur=10.00"

    def test_display_lists_completed_and_in_progress(self, timeline, clock):
        timeline.start_clock("load")
        clock.advance(100)
        timeline.stop_clock("load")
        timeline.start_clock("parse")
        clock.advance(1500)

        view = timeline.render_display()

        assert view.elapsed == "1.6"
        assert [(e.ordinal, e.name, e.formatted_duration) for e in view.completed] == [
            (1, "load", "0.10")
        ]
        assert [(e.name, e.formatted_elapsed, e.in_progress) for e in view.in_progress] == [
            ("parse", "1.5", True)
        ]
        assert not view.is_idle

    def test_display_recomputes_elapsed_on_every_call(self, timeline, clock):
        timeline.start_clock("parse")
        clock.advance(100)
        first = timeline.render_display()
        clock.advance(100)
        second = timeline.render_display()

        assert first.in_progress[0].elapsed_ms == pytest.approx(100.0)
        assert second.in_progress[0].elapsed_ms == pytest.approx(200.0)
        assert timeline.is_running("parse")

    def test_restarted_phase_is_shown_only_in_progress(self, timeline, clock):
        """
        GIVEN "x" started and stopped
        WHEN "x" is started again without a second stop
        THEN the view shows "x" only as in progress.
        """
        timeline.start_clock("x")
        clock.advance(10)
        timeline.stop_clock("x")
        timeline.start_clock("x")

        view = timeline.render_display()

        assert [e.name for e in view.completed] == []
        assert [e.name for e in view.in_progress] == ["x"]

    def test_restarted_phase_is_left_out_of_summary_until_stopped(self, timeline, clock):
        """
        GIVEN "x" started, stopped after 10ms and started again
        WHEN the summary is rendered
        THEN it has no line for "x" until the second stop.
        """
        timeline.start_clock("x")
        clock.advance(10)
        timeline.stop_clock("x")
        timeline.start_clock("x")

        assert "x:" not in timeline.render_summary_text()
        assert timeline.render_summary_text().splitlines() == ["Timeline (0.01s total):"]

        clock.advance(30)
        timeline.stop_clock("x")

        assert "x: 0.03s (started at +0.01s)" in timeline.render_summary_text().splitlines()

    def test_display_ordinals_skip_restarted_names(self, timeline, clock):
        for name in ("a", "b", "c"):
            timeline.start_clock(name)
            clock.advance(1)
            timeline.stop_clock(name)
        timeline.start_clock("b")

        view = timeline.render_display()

        assert [(e.ordinal, e.name) for e in view.completed] == [(1, "a"), (2, "c")]

    def test_abandoned_phase_stays_in_progress(self, timeline, clock):
        timeline.start_clock("forever")
        clock.advance(60000)

        view = timeline.render_display()

        assert view.in_progress[0].formatted_elapsed == "60"
        assert timeline.render_timing_header() == ""

    def test_display_to_dict(self, timeline, clock):
        timeline.start_clock("a")
        clock.advance(20)
        timeline.stop_clock("a")

        data = timeline.render_display().to_dict()

        assert data == {
            "elapsed": "0.02",
            "elapsed_ms": pytest.approx(20.0),
            "completed": [
                {
                    "ordinal": 1,
                    "name": "a",
                    "formatted_duration": "0.02",
                    "duration_ms": pytest.approx(20.0),
                }
            ],
            "in_progress": [],
        }
