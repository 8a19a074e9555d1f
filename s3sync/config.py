import os
from typing import Mapping, Optional

from dotenv import dotenv_values
from pydantic import ValidationError

from s3sync.enums.check_backend import CheckBackend
from s3sync.exceptions.config_exceptions import ConfigValueException, ConfigTypeException
from s3sync.models.job_directives import JobDirectives

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"", "0", "false", "no", "off"}


class Config:
    def __init__(
        self,
        config_file: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        if config_file:
            if not os.path.isfile(config_file):
                raise ConfigValueException(f"{config_file} not a file")
            raw: dict[str, str | None] = dotenv_values(config_file)
        else:
            raw: Mapping[str, str] = os.environ if environ is None else environ

        self.config_file: Optional[str] = (
            os.path.abspath(config_file) if config_file else None
        )
        self.verbose: bool = self._optional_bool(raw, "VERBOSE", False)
        self.aws_cli_path: Optional[str] = raw.get("AWS_CLI_PATH") or None
        self.sbatch_path: str = self._optional(raw, "SBATCH_PATH", "sbatch")
        self.scontrol_path: str = self._optional(raw, "SCONTROL_PATH", "scontrol")
        self.credential_check: CheckBackend = self._optional_enum(
            raw, "CREDENTIAL_CHECK", CheckBackend, CheckBackend.CLI
        )
        self.list_page_size: int = self._optional_int(raw, "S3_LIST_PAGE_SIZE", 10)
        if self.list_page_size <= 0:
            raise ConfigTypeException("S3_LIST_PAGE_SIZE must be positive")

        try:
            self.directives: JobDirectives = JobDirectives(
                time=self._optional(raw, "SBATCH_TIME", "4:00:00"),
                cpus_per_task=self._optional_int(raw, "SBATCH_CPUS_PER_TASK", 4),
                mem_per_cpu=self._optional(raw, "SBATCH_MEM_PER_CPU", "1G"),
                signal_lead=self._optional_int(raw, "SBATCH_SIGNAL_LEAD", 60),
                mail_type=self._optional(raw, "SBATCH_MAIL_TYPE", "BEGIN,END,FAIL"),
            )
        except ValidationError as e:
            raise ConfigTypeException(f"Invalid SBATCH_* setting: {e}")

    def _optional(
        self, config: Mapping[str, str | None], key: str, default: str
    ) -> str:
        value = config.get(key)
        if value is None or value == "":
            return default
        return value

    def _optional_int(
        self, config: Mapping[str, str | None], key: str, default: int
    ) -> int:
        value = config.get(key)
        if value is None or value == "":
            return default
        try:
            return int(value)
        except ValueError:
            raise ConfigTypeException(f"{key} must be integer")

    def _optional_bool(
        self, config: Mapping[str, str | None], key: str, default: bool
    ) -> bool:
        value = config.get(key)
        if value is None:
            return default
        if value.strip().lower() in _TRUE_VALUES:
            return True
        if value.strip().lower() in _FALSE_VALUES:
            return False
        raise ConfigTypeException(f"{key} must be boolean")

    def _optional_enum(
        self, config: Mapping[str, str | None], key: str, enum_type, default
    ):
        value = config.get(key)
        if value is None or value == "":
            return default
        try:
            return enum_type(value.strip().lower())
        except ValueError:
            raise ConfigTypeException(f"{key} must be valid {enum_type.__name__}")
