import os
from typing import Mapping, Optional, Sequence, TextIO

from loguru import logger

from s3sync.config import Config
from s3sync.core.credential_validator import CredentialValidator
from s3sync.core.script_parser import ScriptParser
from s3sync.core.slurm_scheduler import SlurmScheduler, self_command
from s3sync.core.transfer_runner import TransferRunner, transfer_command
from s3sync.models.sync_request import SyncRequest
from s3sync.utils.child_env import child_env


class SyncCoordinator:
    def __init__(
        self,
        config: Config,
        aws_path: str,
        parser: ScriptParser,
        validator: CredentialValidator,
        scheduler: SlurmScheduler,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.config = config
        self.aws_path = aws_path
        self.parser = parser
        self.validator = validator
        self.scheduler = scheduler
        self.environ = os.environ if environ is None else environ

    def run_interactive(
        self, stream: TextIO, sbatch_args: Sequence[str], verbose: bool = False
    ) -> str:
        """Read the pasted script, check it and submit the download job."""
        logger.info("Hello!")
        self._explain_paste()

        request = self.parser.parse(stream)
        logger.info(f"Found S3 URL {request.s3_url}")

        logger.info("Checking AWS credentials...")
        self.validator.check(request)

        logger.info("Everything looks good!")
        logger.info("Submitting ourselves as a SLURM job...")
        logger.info("(You should get mail when the job starts, and completes or fails.)")
        output = self.scheduler.submit(
            sbatch_args,
            self_command(self.config.config_file, verbose or self.config.verbose),
            child_env(request.as_env(), self.environ),
        )
        logger.info(output)
        return output

    async def run_job(self, job_id: str) -> int:
        """Run the transfer inside the SLURM job and return its exit status."""
        request = SyncRequest.from_values(self.environ)
        logger.info(f"Job {job_id}: syncing {request.s3_url} into {os.getcwd()}")

        runner = TransferRunner(self.scheduler, job_id)
        return await runner.run(
            transfer_command(self.aws_path, request.s3_url),
            child_env(request.as_env(), self.environ),
        )

    def _explain_paste(self):
        logger.info("")
        logger.info(f"This script will place all download files in {os.getcwd()}")
        logger.info(
            "If that is the wrong place, then press Control-C to exit, "
            "`cd` to the correct place, and run this script again!"
        )
        logger.info("")
        logger.info("Please paste the download script (the .sh file) now.")
        logger.info("You can paste the entire file.")
        logger.info("When done, send an EOF.")
        logger.info("(Press Return (or Enter) once, and then press Control-D.)")
        logger.info("To exit, press Control-C.")
        logger.info("Waiting for input...")
