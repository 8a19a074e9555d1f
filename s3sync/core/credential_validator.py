import shlex
import subprocess
from typing import Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from s3sync.enums.check_backend import CheckBackend
from s3sync.exceptions.credential_exceptions import CredentialCheckException
from s3sync.models.sync_request import SyncRequest
from s3sync.utils.child_env import child_env


def split_s3_url(url: str) -> Tuple[str, str]:
    """Split ``s3://bucket/some/prefix`` into bucket and prefix."""
    if not url.startswith("s3://"):
        raise ValueError(f"{url} is not an s3:// URL")

    bucket, _, prefix = url[len("s3://") :].partition("/")
    if not bucket:
        raise ValueError(f"{url} has no bucket")
    return bucket, prefix


class CredentialValidator:
    def __init__(
        self,
        aws_path: str,
        backend: CheckBackend = CheckBackend.CLI,
        page_size: int = 10,
    ):
        self._aws_path = aws_path
        self._backend = backend
        self._page_size = page_size

    def check(self, request: SyncRequest) -> None:
        """
        Do a small read-only listing of the sync URL with the pasted credentials.
        Raises:
            CredentialCheckException: If the listing fails, with the captured output.
        """
        if self._backend == CheckBackend.BOTO3:
            self._check_with_boto3(request)
        else:
            self._check_with_cli(request)

    def _check_with_cli(self, request: SyncRequest) -> None:
        command = [
            self._aws_path,
            "s3",
            "ls",
            request.s3_url,
            "--recursive",
            "--page-size",
            str(self._page_size),
        ]
        logger.debug(f"Running {shlex.join(command)}")

        result = subprocess.run(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            env=child_env(request.credentials.as_env()),
        )
        if result.returncode != 0:
            raise CredentialCheckException(
                f"{self._aws_path} s3 ls {request.s3_url}", result.stdout
            )

    def _check_with_boto3(self, request: SyncRequest) -> None:
        described = f"list_objects_v2 {request.s3_url}"
        try:
            bucket, prefix = split_s3_url(request.s3_url)
        except ValueError as e:
            raise CredentialCheckException(described, str(e))

        session = boto3.Session(
            aws_access_key_id=request.credentials.access_key_id,
            aws_secret_access_key=request.credentials.secret_access_key,
            aws_session_token=request.credentials.session_token,
        )
        client = session.client("s3")
        logger.debug(f"Listing bucket {bucket} prefix '{prefix}' with boto3")

        try:
            client.list_objects_v2(
                Bucket=bucket, Prefix=prefix, MaxKeys=self._page_size
            )
        except (ClientError, BotoCoreError) as e:
            raise CredentialCheckException(described, str(e))
