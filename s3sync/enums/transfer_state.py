from enum import Enum


class TransferState(Enum):
    PENDING = 0
    RUNNING = 1
    SUCCEEDED = 2
    FAILED = 3
