import asyncio
import shlex
import subprocess
import sys
from typing import List, Mapping, Optional, Sequence

from loguru import logger

from s3sync.exceptions.scheduler_exceptions import (
    RequeueException,
    SubmissionException,
)
from s3sync.models.job_directives import JobDirectives


class SlurmScheduler:
    def __init__(
        self,
        sbatch_path: str = "sbatch",
        scontrol_path: str = "scontrol",
        directives: Optional[JobDirectives] = None,
    ):
        self._sbatch_path = sbatch_path
        self._scontrol_path = scontrol_path
        self.directives = directives or JobDirectives()

    def build_submit_command(
        self, extra_args: Sequence[str], job_command: Sequence[str]
    ) -> List[str]:
        # Caller arguments come after the defaults so sbatch lets them win.
        # The wrapped command is exec'd so the batch shell becomes our process
        # and receives the B: signal itself.
        return [
            self._sbatch_path,
            *self.directives.as_sbatch_args(),
            *extra_args,
            f"--wrap=exec {shlex.join(job_command)}",
        ]

    def submit(
        self,
        extra_args: Sequence[str],
        job_command: Sequence[str],
        env: Mapping[str, str],
    ) -> str:
        """
        Submit job_command as a batch job.
        Args:
            extra_args: Operator-supplied sbatch options, e.g. ``--partition owners``.
            job_command: The command the job runs.
            env: Environment for sbatch, exported into the job.
        Returns:
            str: sbatch's output, normally "Submitted batch job <id>".
        Raises:
            SubmissionException: If sbatch cannot be run or exits non-zero.
        """
        command = self.build_submit_command(extra_args, job_command)
        logger.debug(f"Running {shlex.join(command)}")

        try:
            result = subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                env=dict(env),
            )
        except OSError as e:
            raise SubmissionException(f"Could not run sbatch: {e}")

        if result.returncode != 0:
            raise SubmissionException(
                f"sbatch exited with code {result.returncode}: {result.stderr.strip()}"
            )
        return result.stdout.strip()

    async def requeue(self, job_id: str) -> None:
        command = [self._scontrol_path, "requeue", job_id]
        logger.debug(f"Running {shlex.join(command)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            raise RequeueException(f"Could not run scontrol: {e}")

        output, _ = await process.communicate()
        if process.returncode != 0:
            raise RequeueException(
                f"scontrol requeue {job_id} exited with code {process.returncode}: "
                f"{output.decode(errors='replace').strip()}"
            )


def self_command(
    config_file: Optional[str] = None, verbose: bool = False
) -> List[str]:
    """The command line that runs this program again inside the job."""
    command = [sys.executable, "-m", "s3sync.main"]
    if config_file:
        command += ["--config", config_file]
    if verbose:
        command.append("--verbose")
    return command
