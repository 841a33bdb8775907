from __future__ import annotations

from dataclasses import replace

from vbunker.domain.entities.selection_state import SelectionState


def reset_date_time(state: SelectionState) -> SelectionState:
    """Drop the picked date and time slot."""
    return replace(state, date=None, time=None)


def reset_master(state: SelectionState) -> SelectionState:
    """Drop the master; date and time depend on the master, so they go too."""
    return reset_date_time(replace(state, master=None))


def reset_service(state: SelectionState) -> SelectionState:
    """Drop the service and everything picked after it, except the car."""
    return reset_master(replace(state, service=None))


def reset_car(state: SelectionState) -> SelectionState:
    return replace(state, car=None)


def reset_all(state: SelectionState) -> SelectionState:
    return SelectionState()
