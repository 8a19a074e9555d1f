from typing import Dict

from s3sync.enums.transfer_state import TransferState as State, TransferState
from s3sync.exceptions.state_exceptions import IllegalStateSwitchException


class StateMachine:
    def __init__(self):
        self.__state: State = State.PENDING
        self.__transitions: Dict[State, Dict[str, State]] = {
            State.PENDING: {
                "start": State.RUNNING,
                "error": State.FAILED,
            },
            State.RUNNING: {
                "succeed": State.SUCCEEDED,
                "fail": State.FAILED,
                "error": State.FAILED,
            },
            State.SUCCEEDED: {},
            State.FAILED: {},
        }

    def trigger(self, event: str) -> bool:
        if event in self.__transitions[self.__state]:
            self.__state = self.__transitions[self.__state][event]
            return True
        else:
            raise IllegalStateSwitchException(
                self.__state, event, set(self.__transitions[self.__state].keys())
            )

    def get_state(self) -> TransferState:
        return self.__state
