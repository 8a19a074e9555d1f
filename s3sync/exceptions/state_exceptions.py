from typing import Set

from s3sync.enums.transfer_state import TransferState


class IllegalStateSwitchException(Exception):
    def __init__(self, state: TransferState, event: str, valid_events: Set[str]):
        self.state: TransferState = state
        self.event: str = event
        self.valid_events: Set[str] = valid_events

        message: str = (
            f"Event '{event}' invalid from {state.name}. Valid: {sorted(valid_events)}"
        )
        super().__init__(message)
