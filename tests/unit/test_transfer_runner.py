import asyncio
import os
import signal
from unittest.mock import AsyncMock, Mock

import pytest

from s3sync.core.transfer_runner import TransferRunner, exit_status, transfer_command
from s3sync.enums.transfer_state import TransferState
from s3sync.exceptions.scheduler_exceptions import RequeueException


@pytest.fixture
def scheduler():
    scheduler = Mock()
    scheduler.requeue = AsyncMock()
    return scheduler


def test_transfer_command():
    assert transfer_command("/usr/bin/aws", "s3://bucket/run") == [
        "/usr/bin/aws",
        "s3",
        "sync",
        "s3://bucket/run",
        ".",
        "--only-show-errors",
    ]


def test_exit_status():
    assert exit_status(0) == 0
    assert exit_status(2) == 2
    assert exit_status(-signal.SIGKILL) == 137


@pytest.mark.asyncio
async def test_success_exits_zero(scheduler):
    runner = TransferRunner(scheduler, "4242")

    status = await runner.run(["sh", "-c", "exit 0"], os.environ)

    assert status == 0
    assert runner.state.get_state() == TransferState.SUCCEEDED
    scheduler.requeue.assert_not_awaited()


@pytest.mark.asyncio
async def test_failure_status_is_propagated(scheduler):
    runner = TransferRunner(scheduler, "4242")

    status = await runner.run(["sh", "-c", "exit 3"], os.environ)

    assert status == 3
    assert runner.state.get_state() == TransferState.FAILED


@pytest.mark.asyncio
async def test_killed_child_reports_shell_status(scheduler):
    runner = TransferRunner(scheduler, "4242")

    status = await runner.run(["sh", "-c", "kill -TERM $$"], os.environ)

    assert status == 128 + signal.SIGTERM


@pytest.mark.asyncio
async def test_child_receives_environment(scheduler):
    runner = TransferRunner(scheduler, "4242")

    status = await runner.run(
        ["sh", "-c", 'test "$S3_URL" = s3://bucket/run'],
        {"PATH": os.environ.get("PATH", "/usr/bin:/bin"), "S3_URL": "s3://bucket/run"},
    )

    assert status == 0


@pytest.mark.asyncio
async def test_missing_command(scheduler):
    runner = TransferRunner(scheduler, "4242")

    status = await runner.run(["/nonexistent/aws", "s3", "sync"], os.environ)

    assert status == 1
    assert runner.state.get_state() == TransferState.FAILED


@pytest.mark.asyncio
async def test_each_warning_requests_one_requeue(scheduler):
    runner = TransferRunner(scheduler, "4242")
    loop = asyncio.get_running_loop()
    loop.call_later(0.3, os.kill, os.getpid(), signal.SIGUSR1)
    loop.call_later(0.6, os.kill, os.getpid(), signal.SIGUSR1)

    status = await runner.run(["sh", "-c", "sleep 1.5; exit 7"], os.environ)

    # The transfer ran to completion despite the signals.
    assert status == 7
    assert runner.requeue_requests == 2
    assert scheduler.requeue.await_count == 2
    scheduler.requeue.assert_awaited_with("4242")


@pytest.mark.asyncio
async def test_failed_requeue_does_not_affect_transfer(scheduler):
    scheduler.requeue.side_effect = RequeueException("scontrol: error")
    runner = TransferRunner(scheduler, "4242")
    loop = asyncio.get_running_loop()
    loop.call_later(0.3, os.kill, os.getpid(), signal.SIGUSR1)

    status = await runner.run(["sh", "-c", "sleep 1; exit 0"], os.environ)

    assert status == 0
    assert runner.requeue_failures == 1
    assert scheduler.requeue.await_count == 1


@pytest.mark.asyncio
async def test_handler_removed_after_transfer(scheduler):
    runner = TransferRunner(scheduler, "4242")

    await runner.run(["sh", "-c", "exit 0"], os.environ)

    assert signal.getsignal(signal.SIGUSR1) in (signal.SIG_DFL, None)


@pytest.mark.asyncio
async def test_hung_requeue_does_not_hold_exit(scheduler):
    async def never_returns(job_id):
        await asyncio.sleep(60)

    scheduler.requeue.side_effect = never_returns
    runner = TransferRunner(scheduler, "4242", requeue_timeout=0.2)
    loop = asyncio.get_running_loop()
    loop.call_later(0.1, os.kill, os.getpid(), signal.SIGUSR1)

    started = loop.time()
    status = await runner.run(["sh", "-c", "sleep 0.5; exit 0"], os.environ)

    assert status == 0
    assert loop.time() - started < 3
    assert runner.requeue_requests == 1
