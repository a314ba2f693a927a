from __future__ import annotations

import unittest

from covid_chart.layout import Dimensions
from covid_chart.state import (
    ERROR_MESSAGE,
    InvalidTransitionError,
    Phase,
    begin_load,
    fail_load,
    finish_load,
    initial_state,
    needs_fetch,
    resize,
    retry,
    select_days,
    toggle_theme,
)

DIMS = Dimensions(1080, 480)


class ViewStateTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ready = finish_load(begin_load(initial_state(30, DIMS)))

    def test_initial_state_needs_a_fetch(self) -> None:
        state = initial_state(30, DIMS)
        self.assertIs(state.phase, Phase.IDLE)
        self.assertFalse(state.dark_mode)
        self.assertTrue(needs_fetch(state))

    def test_load_cycle(self) -> None:
        loading = begin_load(initial_state(60, DIMS))
        self.assertTrue(loading.loading)
        ready = finish_load(loading)
        self.assertIs(ready.phase, Phase.READY)
        self.assertFalse(ready.loading)
        self.assertFalse(needs_fetch(ready))

    def test_successful_loads_are_counted(self) -> None:
        self.assertEqual(initial_state(30, DIMS).loads, 0)
        self.assertEqual(self.ready.loads, 1)
        failed = fail_load(begin_load(select_days(self.ready, 60)))
        self.assertEqual(failed.loads, 1)
        self.assertEqual(finish_load(retry(failed)).loads, 2)

    def test_tracked_changes_trigger_fetch(self) -> None:
        self.assertTrue(needs_fetch(select_days(self.ready, 90)))
        self.assertTrue(needs_fetch(toggle_theme(self.ready)))
        self.assertTrue(needs_fetch(resize(self.ready, Dimensions(500, 300))))

    def test_same_range_does_not_refetch(self) -> None:
        self.assertFalse(needs_fetch(select_days(self.ready, 30)))
        self.assertIs(resize(self.ready, DIMS), self.ready)

    def test_toggle_theme_keeps_range(self) -> None:
        dark = toggle_theme(select_days(self.ready, 60))
        self.assertTrue(dark.dark_mode)
        self.assertEqual(dark.days_to_show, 60)
        self.assertFalse(toggle_theme(dark).dark_mode)

    def test_failure_then_retry(self) -> None:
        failed = fail_load(begin_load(initial_state(30, DIMS)))
        self.assertIs(failed.phase, Phase.ERRORED)
        self.assertEqual(failed.error, ERROR_MESSAGE)
        self.assertFalse(needs_fetch(failed))

        again = retry(failed)
        self.assertIs(again.phase, Phase.LOADING)
        self.assertIsNone(again.error)
        self.assertTrue(needs_fetch(again))

    def test_range_change_leaves_error(self) -> None:
        failed = fail_load(begin_load(initial_state(30, DIMS)))
        self.assertTrue(needs_fetch(select_days(failed, 60)))

    def test_invalid_transitions(self) -> None:
        with self.assertRaises(InvalidTransitionError):
            retry(self.ready)
        with self.assertRaises(InvalidTransitionError):
            finish_load(initial_state(30, DIMS))
        with self.assertRaises(InvalidTransitionError):
            fail_load(self.ready)

    def test_days_must_be_an_option(self) -> None:
        with self.assertRaises(ValueError):
            initial_state(45, DIMS)
        with self.assertRaises(ValueError):
            select_days(self.ready, 7)


if __name__ == "__main__":
    unittest.main()
