from enum import Enum
from typing import Mapping


class ExecutionPhase(Enum):
    INTERACTIVE = "interactive"
    JOB = "job"

    @classmethod
    def detect(cls, environ: Mapping[str, str]) -> "ExecutionPhase":
        if environ.get("SLURM_JOB_ID") or environ.get("SLURM_JOBID"):
            return cls.JOB
        return cls.INTERACTIVE
