from enum import Enum


class CheckBackend(Enum):
    CLI = "cli"
    BOTO3 = "boto3"
