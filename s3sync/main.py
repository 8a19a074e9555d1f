import argparse
import asyncio
import os
import sys
from typing import Mapping, Optional, Sequence, TextIO

from dependency_injector import providers
from loguru import logger

from s3sync.containers import ApplicationContainer
from s3sync.enums.execution_phase import ExecutionPhase
from s3sync.exceptions.config_exceptions import ConfigException
from s3sync.exceptions.credential_exceptions import CredentialCheckException
from s3sync.exceptions.input_exceptions import (
    InputInterruptedException,
    InputReadException,
    MissingValueException,
)
from s3sync.exceptions.scheduler_exceptions import SubmissionException
from s3sync.exceptions.tool_exceptions import MissingToolException
from s3sync.utils.tool_locator import locate_tool


def configure_logging(verbose: bool) -> None:
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG")
    else:
        logger.add(sys.stderr, level="INFO", format="{message}")


def main(
    config_path: Optional[str] = None,
    sbatch_args: Sequence[str] = (),
    verbose: bool = False,
    environ: Optional[Mapping[str, str]] = None,
    stream: Optional[TextIO] = None,
) -> int:
    environ = os.environ if environ is None else environ
    configure_logging(verbose)

    container = ApplicationContainer()
    container.config_path.override(providers.Object(config_path))
    container.environ.override(providers.Object(environ))

    try:
        config = container.config()
    except ConfigException as e:
        logger.error(f"Configuration error: {e}")
        return 1

    if config.verbose and not verbose:
        configure_logging(True)
    verbose = verbose or config.verbose

    phase = ExecutionPhase.detect(environ)
    try:
        aws_path = container.aws_path()
        logger.info(f"Using `aws` at {aws_path}")
        if phase == ExecutionPhase.INTERACTIVE:
            locate_tool("sbatch", config.sbatch_path)
    except MissingToolException as e:
        logger.error(str(e))
        logger.error(f"You may have to install `{e.tool}`, or modify your PATH.")
        logger.error(
            f"Please do what is needed to make the `{e.tool}` command available, "
            "and try again."
        )
        return 1

    coordinator = container.coordinator()

    if phase == ExecutionPhase.JOB:
        job_id = environ.get("SLURM_JOB_ID") or environ.get("SLURM_JOBID")
        try:
            return asyncio.run(coordinator.run_job(job_id))
        except MissingValueException as e:
            logger.error(f"ERROR!  {e}  The job environment is incomplete.")
            return 1

    try:
        coordinator.run_interactive(stream or sys.stdin, sbatch_args, verbose)
    except (InputInterruptedException, KeyboardInterrupt):
        logger.info("Goodbye!")
        return 0
    except MissingValueException as e:
        logger.error(f"ERROR!  {e}")
        logger.error(e.hint)
        logger.error("Please check your input, and try again.")
        return 1
    except InputReadException as e:
        logger.error(f"Sorry, we got an unexpected error from read. {e}")
        return 1
    except CredentialCheckException as e:
        logger.error(f"ERROR!  {e}")
        logger.error("There is probably a problem with your credentials.")
        logger.error("Here is the output we received from the command:")
        logger.error(e.output)
        return 1
    except SubmissionException as e:
        logger.error(f"ERROR!  Submitting the job failed: {e}")
        return 1

    return 0


def run():
    parser = argparse.ArgumentParser(
        description="Download an S3 sync script's data inside a SLURM job.",
        epilog="Any other arguments, e.g. --partition owners, are passed to sbatch.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--config",
        help="A .env configuration file",
        type=str,
        default=None,
    )
    parser.add_argument(
        "--verbose",
        help="Log debug output",
        action="store_true",
    )
    args, sbatch_args = parser.parse_known_args()

    sys.exit(main(args.config, sbatch_args, args.verbose))


if __name__ == "__main__":
    run()
