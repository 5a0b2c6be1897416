"""State objects bound by the drop window."""

from png_trimmer.state.drop_state import DropState, UIState, state_message

__all__ = ["DropState", "UIState", "state_message"]
