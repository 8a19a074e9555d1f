import asyncio
import shlex
import signal
from typing import Mapping, Optional, Sequence, Set

from loguru import logger

from s3sync.core.slurm_scheduler import SlurmScheduler
from s3sync.core.state_machine import StateMachine
from s3sync.exceptions.scheduler_exceptions import SchedulerException


def transfer_command(aws_path: str, s3_url: str, destination: str = ".") -> list:
    return [aws_path, "s3", "sync", s3_url, destination, "--only-show-errors"]


def exit_status(return_code: int) -> int:
    """Map a child's return code to a shell-style exit status."""
    if return_code < 0:
        return 128 - return_code
    return return_code


class TransferRunner:
    """
    Runs the transfer as a detached child while listening for the scheduler's
    early-warning signal.

    Each delivery of the signal schedules one requeue request for the job.
    The request is fire-and-forget: the transfer keeps running and its exit
    status is what run() returns.
    """

    def __init__(
        self,
        scheduler: SlurmScheduler,
        job_id: str,
        state: Optional[StateMachine] = None,
        warning_signal: signal.Signals = signal.SIGUSR1,
        requeue_timeout: float = 5.0,
    ):
        self.scheduler = scheduler
        self.job_id = job_id
        self.state = state or StateMachine()
        self.warning_signal = warning_signal
        self.requeue_timeout = requeue_timeout
        self.requeue_requests = 0
        self.requeue_failures = 0
        self._pending: Set[asyncio.Task] = set()

    async def run(self, command: Sequence[str], env: Mapping[str, str]) -> int:
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(self.warning_signal, self._on_warning)
        try:
            logger.debug(f"Running {shlex.join(command)}")
            try:
                process = await asyncio.create_subprocess_exec(
                    *command,
                    stdin=asyncio.subprocess.DEVNULL,
                    env=dict(env),
                    start_new_session=True,
                )
            except OSError as e:
                logger.error(f"Could not start transfer: {e}")
                self.state.trigger("error")
                return 1

            self.state.trigger("start")
            logger.info(f"Transfer started as PID {process.pid}")
            return_code = await process.wait()
        finally:
            loop.remove_signal_handler(self.warning_signal)

        if self._pending:
            await self._settle_requeues()

        status = exit_status(return_code)
        if status == 0:
            self.state.trigger("succeed")
            logger.info("Transfer complete")
        else:
            self.state.trigger("fail")
            logger.error(f"Transfer failed with exit status {status}")
        return status

    async def _settle_requeues(self):
        # Requeue calls get a bounded grace period once the transfer is done.
        _, unfinished = await asyncio.wait(
            self._pending, timeout=self.requeue_timeout
        )
        for task in unfinished:
            logger.warning(
                f"Requeue request for job {self.job_id} still running, abandoning it"
            )
            task.cancel()
        if unfinished:
            await asyncio.wait(unfinished)

    def _on_warning(self):
        self.requeue_requests += 1
        logger.warning(
            f"Received {self.warning_signal.name}, asking SLURM to requeue job {self.job_id}"
        )
        task = asyncio.ensure_future(self._request_requeue())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _request_requeue(self):
        try:
            await self.scheduler.requeue(self.job_id)
            logger.info(f"Requeue requested for job {self.job_id}")
        except SchedulerException as e:
            self.requeue_failures += 1
            logger.error(f"Requeue request failed: {e}")
