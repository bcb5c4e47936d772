"""Tests for the Home job list component."""

from pueue_tui.action import Error, Tick, UpdateStatus
from pueue_tui.client.models import Done, Failed, Queued, Running
from pueue_tui.components.home import Home
from pueue_tui.keys import KeyCode, KeyEvent, KeyModifiers
from pueue_tui.tui import events
from pueue_tui.tui.terminal import Frame, Rect

from tests.conftest import make_job, make_snapshot

DOWN = KeyEvent(KeyCode.DOWN)
UP = KeyEvent(KeyCode.UP)


def home_with(jobs) -> Home:
    home = Home()
    home.update(UpdateStatus(make_snapshot(jobs)))
    return home


class TestNavigation:
    """Tests for moving the selection."""

    def test_first_update_selects_first_row(self, three_jobs):
        assert home_with(three_jobs).selected == 0

    def test_down_moves_and_wraps(self, three_jobs):
        home = home_with(three_jobs)
        home.select(1)

        home.handle_events(events.Key(DOWN))
        assert home.selected == 2

        home.handle_events(events.Key(DOWN))
        assert home.selected == 0

    def test_up_wraps_to_last(self, three_jobs):
        home = home_with(three_jobs)

        home.handle_events(events.Key(UP))

        assert home.selected == 2

    def test_down_then_up_round_trip(self, three_jobs):
        home = home_with(three_jobs)
        for start in range(3):
            home.select(start)
            home.next_row()
            home.prev_row()
            assert home.selected == start

    def test_scrollbar_follows_selection(self, three_jobs):
        home = home_with(three_jobs)
        home.next_row()
        assert home.state.scrollbar.position == home.selected == 1

    def test_empty_list_is_noop(self):
        home = Home()
        home.handle_events(events.Key(DOWN))
        home.handle_events(events.Key(UP))
        assert home.selected is None

    def test_modified_keys_ignored(self, three_jobs):
        home = home_with(three_jobs)
        home.handle_events(events.Key(KeyEvent(KeyCode.DOWN, KeyModifiers.SHIFT)))
        assert home.selected == 0

    def test_mouse_scroll(self, three_jobs):
        home = home_with(three_jobs)
        home.handle_events(events.Mouse("scroll_down", None, 0, 0))
        assert home.selected == 1
        home.handle_events(events.Mouse("scroll_up", None, 0, 0))
        assert home.selected == 0

    def test_other_events_return_nothing(self, three_jobs):
        home = home_with(three_jobs)
        assert home.handle_events(events.Tick()) is None
        assert home.handle_events(None) is None


class TestUpdate:
    """Tests for state changes driven by actions."""

    def test_update_returns_no_follow_up(self, three_jobs):
        home = Home()
        assert home.update(UpdateStatus(make_snapshot(three_jobs))) is None
        assert home.update(Tick()) is None

    def test_jobs_sorted_by_id(self):
        home = home_with([make_job(5), make_job(2), make_job(9)])
        assert [job.id for job in home.jobs] == [2, 5, 9]

    def test_selection_clamped_when_list_shrinks(self, three_jobs):
        home = home_with(three_jobs)
        home.select(2)

        home.update(UpdateStatus(make_snapshot(three_jobs[:1])))

        assert home.selected == 0

    def test_selection_cleared_when_list_empties(self, three_jobs):
        home = home_with(three_jobs)
        home.update(UpdateStatus(make_snapshot([])))
        assert home.selected is None

    def test_error_kept_until_next_update(self, three_jobs):
        home = home_with(three_jobs)

        home.update(Error("Failed to fetch status: down"))
        assert home.last_error == "Failed to fetch status: down"
        assert home.jobs == three_jobs

        home.update(UpdateStatus(make_snapshot(three_jobs)))
        assert home.last_error is None


class TestSummary:
    """Tests for the status bar summary."""

    def test_no_jobs(self):
        assert Home().summary() == "No jobs"

    def test_counts_per_status(self):
        home = home_with([
            make_job(1, Running()),
            make_job(2, Queued()),
            make_job(3, Queued()),
            make_job(4, Done(result=Failed(1))),
        ])
        assert home.summary() == "4 jobs: 1 Running, 2 Queued, 1 Done"

    def test_singular(self):
        assert home_with([make_job(1)]).summary() == "1 job: 1 Queued"


class TestDraw:
    """Tests for drawing into a frame."""

    def test_table_and_status_bar(self, three_jobs):
        home = home_with(three_jobs)
        frame = Frame(Rect(0, 0, 80, 10))

        home.draw(frame, frame.area)

        areas = [area for _, area in frame.regions]
        assert areas == [Rect(0, 0, 80, 9), Rect(0, 9, 80, 1)]

    def test_empty_list_draws(self):
        frame = Frame(Rect(0, 0, 80, 10))
        Home().draw(frame, frame.area)
        assert len(frame.regions) == 2
