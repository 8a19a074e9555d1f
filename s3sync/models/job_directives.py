from typing import List

from pydantic import BaseModel, Field


class JobDirectives(BaseModel):
    time: str = "4:00:00"
    cpus_per_task: int = Field(default=4, gt=0)
    mem_per_cpu: str = "1G"
    signal_lead: int = Field(default=60, ge=0)
    mail_type: str = "BEGIN,END,FAIL"

    @property
    def signal(self) -> str:
        # B: sends the signal to the batch shell only, not to job steps
        return f"B:SIGUSR1@{self.signal_lead}"

    def as_sbatch_args(self) -> List[str]:
        return [
            f"--time={self.time}",
            f"--cpus-per-task={self.cpus_per_task}",
            f"--mem-per-cpu={self.mem_per_cpu}",
            f"--signal={self.signal}",
            f"--mail-type={self.mail_type}",
        ]
