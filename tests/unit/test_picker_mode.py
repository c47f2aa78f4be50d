"""
Unit tests for the picker mode state machine
"""
from core.picker_mode import PickerKind, PickerMode, PickerModeState
from core.rclone_path import RclonePath

SOURCE = RclonePath("r:docs/report.pdf")


def test_starts_in_browse():
    state = PickerModeState()
    assert state.mode == PickerMode.browse()
    assert state.mode.is_browse


def test_request_move_and_cancel():
    state = PickerModeState()
    changes = []
    state.subscribe(changes.append)
    assert state.request_move(SOURCE)
    assert state.mode == PickerMode.move(SOURCE)
    assert state.cancel()
    assert state.mode.is_browse
    assert changes == [PickerMode.move(SOURCE), PickerMode.browse()]


def test_only_one_destination_mode_at_a_time():
    state = PickerModeState()
    state.request_copy(SOURCE)
    assert not state.request_move(RclonePath("r:other"))
    assert state.mode == PickerMode.copy(SOURCE)


def test_take_destination_request_returns_source_once():
    state = PickerModeState()
    state.request_move(SOURCE)
    assert state.take_destination_request(PickerKind.SELECT_COPY_DESTINATION) is None
    assert state.take_destination_request(PickerKind.SELECT_MOVE_DESTINATION) == SOURCE
    assert state.mode.is_browse
    assert state.take_destination_request(PickerKind.SELECT_MOVE_DESTINATION) is None


def test_cancel_in_browse_is_noop():
    state = PickerModeState()
    changes = []
    state.subscribe(changes.append)
    assert not state.cancel()
    assert changes == []


def test_handler_can_transition_again():
    state = PickerModeState()
    seen = []

    def handler(mode):
        seen.append(mode.kind)
        if mode.kind is PickerKind.SELECT_MOVE_DESTINATION:
            state.take_destination_request(PickerKind.SELECT_MOVE_DESTINATION)

    state.subscribe(handler)
    state.request_move(SOURCE)
    assert seen == [PickerKind.SELECT_MOVE_DESTINATION, PickerKind.BROWSE]
    assert state.mode.is_browse
