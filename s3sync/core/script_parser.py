from typing import Dict, List, TextIO

from loguru import logger

from s3sync.exceptions.input_exceptions import (
    InputInterruptedException,
    InputReadException,
)
from s3sync.models.sync_request import S3_URL_VARIABLE, SyncRequest

CREDENTIAL_VARIABLES = (
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
)


class ScriptParser:
    """Pulls AWS credentials and the sync URL out of a pasted download script."""

    def __init__(self):
        self._values: Dict[str, str] = {}

    def parse(self, stream: TextIO) -> SyncRequest:
        """
        Read the stream to its end and build a sync request from it.
        Args:
            stream (TextIO): The pasted script, normally stdin.
        Returns:
            SyncRequest: The extracted credentials and S3 URL.
        Raises:
            InputInterruptedException: If the operator pressed Control-C.
            InputReadException: If the stream could not be read.
            MissingValueException: If a required value never appeared.
        """
        self._values = {}
        try:
            while True:
                line = stream.readline()
                if not line:
                    break
                self.process_line(line)
        except KeyboardInterrupt:
            raise InputInterruptedException()
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadException(f"Unexpected error from read: {e}")

        logger.info("EOF received!")
        return SyncRequest.from_values(self._values)

    def process_line(self, line: str) -> None:
        words = line.split()
        if not words:
            return

        if words[0] == "export":
            if len(words) > 1:
                self._process_export(words[1])
        elif words[0] == "aws":
            self._process_aws(words)

    def _process_export(self, assignment: str) -> None:
        name, _, value = assignment.partition("=")
        if name in CREDENTIAL_VARIABLES:
            self._values[name] = value
            logger.debug(f"Found {name}")

    def _process_aws(self, words: List[str]) -> None:
        if len(words) != 5:
            return
        if words[1:3] != ["s3", "sync"] or words[4] != ".":
            return

        self._values[S3_URL_VARIABLE] = words[3]
        logger.debug(f"Found S3 URL {words[3]}")
