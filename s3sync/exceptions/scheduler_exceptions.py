class SchedulerException(Exception):
    """Base for all SLURM command failures"""

    pass


class SubmissionException(SchedulerException):
    pass


class RequeueException(SchedulerException):
    pass
