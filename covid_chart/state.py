"""View state of the chart and its load lifecycle.

Idle -> Loading -> Ready | Errored; Errored -> Loading on retry or when a
tracked input (range, theme, dimensions) changes. Every transition returns a
new ``ViewState``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from covid_chart.config import DAY_OPTIONS
from covid_chart.layout import Dimensions

ERROR_MESSAGE = "Failed to load COVID data. Please try again later."


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"


class InvalidTransitionError(Exception):
    pass


@dataclass(frozen=True)
class ViewState:
    days_to_show: int
    dark_mode: bool
    dimensions: Dimensions
    phase: Phase = Phase.IDLE
    error: str | None = None
    # fetch key of the last completed load, None until one finished
    loaded_key: tuple | None = None
    # number of successful loads in this session
    loads: int = 0

    @property
    def loading(self) -> bool:
        return self.phase is Phase.LOADING


def initial_state(days_to_show: int, dimensions: Dimensions, dark_mode: bool = False) -> ViewState:
    if days_to_show not in DAY_OPTIONS:
        raise ValueError(f"days_to_show must be one of {DAY_OPTIONS}, got {days_to_show}")
    return ViewState(days_to_show=days_to_show, dark_mode=dark_mode, dimensions=dimensions)


def fetch_key(state: ViewState) -> tuple:
    return (state.days_to_show, state.dark_mode, state.dimensions)


def needs_fetch(state: ViewState) -> bool:
    if state.phase is Phase.IDLE or state.phase is Phase.LOADING:
        return True
    return state.loaded_key != fetch_key(state)


def begin_load(state: ViewState) -> ViewState:
    return replace(state, phase=Phase.LOADING, error=None)


def finish_load(state: ViewState) -> ViewState:
    if state.phase is not Phase.LOADING:
        raise InvalidTransitionError(f"cannot finish a load from {state.phase.value}")
    return replace(
        state,
        phase=Phase.READY,
        error=None,
        loaded_key=fetch_key(state),
        loads=state.loads + 1,
    )


def fail_load(state: ViewState, message: str = ERROR_MESSAGE) -> ViewState:
    if state.phase is not Phase.LOADING:
        raise InvalidTransitionError(f"cannot fail a load from {state.phase.value}")
    return replace(state, phase=Phase.ERRORED, error=message, loaded_key=fetch_key(state))


def retry(state: ViewState) -> ViewState:
    if state.phase is not Phase.ERRORED:
        raise InvalidTransitionError(f"retry is only possible after an error, not from {state.phase.value}")
    return begin_load(state)


def select_days(state: ViewState, days_to_show: int) -> ViewState:
    if days_to_show not in DAY_OPTIONS:
        raise ValueError(f"days_to_show must be one of {DAY_OPTIONS}, got {days_to_show}")
    return replace(state, days_to_show=days_to_show)


def toggle_theme(state: ViewState) -> ViewState:
    return replace(state, dark_mode=not state.dark_mode)


def resize(state: ViewState, dimensions: Dimensions) -> ViewState:
    if dimensions == state.dimensions:
        return state
    return replace(state, dimensions=dimensions)
