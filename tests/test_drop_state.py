from __future__ import annotations

from types import SimpleNamespace

import pytest

from png_trimmer.state import DropState, UIState, state_message


@pytest.mark.parametrize(
    ("state", "message"),
    [
        (UIState.IDLE, "Drag image here"),
        (UIState.DRAGGING, "Drop image"),
        (UIState.DROPPED, "Image dropped"),
        (UIState.FAILED, "Trim failed"),
    ],
)
def test_state_message(state, message):
    assert state_message(state) == message


def test_initial_state_is_idle():
    st = DropState()
    assert st.current is UIState.IDLE
    assert st.message == "Drag image here"
    assert st.state == "idle"


def test_drag_over_then_successful_drop():
    st = DropState()
    messages: list[str] = []
    st.messageChanged.connect(messages.append)

    st.drag_over()
    assert st.message == "Drop image"

    st.drop_finished([SimpleNamespace(ok=True)])
    assert st.current is UIState.DROPPED
    assert messages == ["Drop image", "Image dropped"]


def test_drag_leave_stays_dragging():
    st = DropState()
    st.drag_over()
    st.drag_leave()
    assert st.current is UIState.DRAGGING


def test_failed_file_resolves_to_failed():
    st = DropState()
    st.drag_over()
    st.drop_finished([SimpleNamespace(ok=True), SimpleNamespace(ok=False)])
    assert st.current is UIState.FAILED
    assert st.message == "Trim failed"


def test_empty_drop_counts_as_dropped():
    st = DropState()
    st.drop_finished([])
    assert st.current is UIState.DROPPED


def test_new_drag_after_drop_accepts_again():
    st = DropState()
    st.drop_finished([])
    st.drag_over()
    assert st.current is UIState.DRAGGING


def test_repeated_transition_emits_once():
    st = DropState()
    seen: list[str] = []
    st.stateChanged.connect(seen.append)
    st.drag_over()
    st.drag_over()
    st.drag_leave()
    assert seen == ["dragging"]
