from dataclasses import dataclass
from typing import Dict, Mapping

from s3sync.exceptions.input_exceptions import MissingValueException
from s3sync.models.credentials_model import CredentialsModel

S3_URL_VARIABLE = "S3_URL"

# Checked in this order; the first gap is the one reported.
REQUIRED_FIELDS = (
    (
        "AWS_SESSION_TOKEN",
        "AWS_SESSION_TOKEN variable",
        "export AWS_SESSION_TOKEN",
    ),
    (
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SECRET_ACCESS_KEY variable",
        "export AWS_SECRET_ACCESS_KEY",
    ),
    (
        "AWS_ACCESS_KEY_ID",
        "AWS_ACCESS_KEY_ID variable",
        "export AWS_ACCESS_KEY_ID",
    ),
    (S3_URL_VARIABLE, '"aws s3 sync" command', "aws s3 sync"),
)


@dataclass(frozen=True)
class SyncRequest:
    credentials: CredentialsModel
    s3_url: str

    def as_env(self) -> Dict[str, str]:
        env = self.credentials.as_env()
        env[S3_URL_VARIABLE] = self.s3_url
        return env

    @classmethod
    def from_values(cls, values: Mapping[str, str]) -> "SyncRequest":
        """
        Build a request from environment-style names.
        Args:
            values: Mapping holding the three AWS_* credential variables and S3_URL.
        Raises:
            MissingValueException: For the first required value that is absent or empty.
        """
        for key, field, line in REQUIRED_FIELDS:
            if not values.get(key):
                raise MissingValueException(
                    field, f'Maybe your "{line}" lines were commented out?'
                )

        return cls(
            CredentialsModel(
                values["AWS_ACCESS_KEY_ID"],
                values["AWS_SECRET_ACCESS_KEY"],
                values["AWS_SESSION_TOKEN"],
            ),
            values[S3_URL_VARIABLE],
        )
