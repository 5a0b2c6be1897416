from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

from PySide6.QtCore import Property, QObject, Signal

from png_trimmer.logger import get_logger

_logger = get_logger("drop_state")


class UIState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DROPPED = "dropped"
    FAILED = "failed"


_MESSAGES = {
    UIState.IDLE: "Drag image here",
    UIState.DRAGGING: "Drop image",
    UIState.DROPPED: "Image dropped",
    UIState.FAILED: "Trim failed",
}


def state_message(state: UIState) -> str:
    return _MESSAGES[state]


class DropState(QObject):
    """Drag/drop state shown by the drop area.

    Transitions:
    - drag_over: any state -> DRAGGING
    - drag_leave: stays DRAGGING (leaving the window does not reset to IDLE)
    - drop_finished: DROPPED when every file succeeded, FAILED otherwise
    """

    stateChanged = Signal(str)
    messageChanged = Signal(str)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._state = UIState.IDLE

    def _get_state(self) -> str:
        return self._state.value

    state = Property(str, _get_state, notify=stateChanged)  # type: ignore[arg-type]

    def _get_message(self) -> str:
        return state_message(self._state)

    message = Property(str, _get_message, notify=messageChanged)  # type: ignore[arg-type]

    @property
    def current(self) -> UIState:
        return self._state

    def drag_over(self) -> None:
        self._set_state(UIState.DRAGGING)

    def drag_leave(self) -> None:
        self._set_state(UIState.DRAGGING)

    def drop_finished(self, outcomes: Iterable[Any]) -> None:
        """Resolve the drop from per-file outcomes (objects with an `ok` flag)."""
        failed = [o for o in outcomes if not getattr(o, "ok", False)]
        if failed:
            _logger.debug("drop finished with %d failed file(s)", len(failed))
        self._set_state(UIState.FAILED if failed else UIState.DROPPED)

    def _set_state(self, state: UIState) -> None:
        if state == self._state:
            return
        _logger.debug("state %s -> %s", self._state.value, state.value)
        self._state = state
        self.stateChanged.emit(state.value)
        self.messageChanged.emit(state_message(state))
