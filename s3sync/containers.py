from dependency_injector import containers, providers

from s3sync.config import Config
from s3sync.coordinator import SyncCoordinator
from s3sync.core.credential_validator import CredentialValidator
from s3sync.core.script_parser import ScriptParser
from s3sync.core.slurm_scheduler import SlurmScheduler
from s3sync.utils.tool_locator import locate_tool


class ApplicationContainer(containers.DeclarativeContainer):
    config_path = providers.Object(None)
    environ = providers.Object(None)

    config = providers.Singleton(Config, config_file=config_path, environ=environ)

    aws_path = providers.Singleton(
        locate_tool, name="aws", override=config.provided.aws_cli_path
    )

    scheduler = providers.Singleton(
        SlurmScheduler,
        sbatch_path=config.provided.sbatch_path,
        scontrol_path=config.provided.scontrol_path,
        directives=config.provided.directives,
    )

    validator = providers.Singleton(
        CredentialValidator,
        aws_path=aws_path,
        backend=config.provided.credential_check,
        page_size=config.provided.list_page_size,
    )

    parser = providers.Factory(ScriptParser)

    coordinator = providers.Singleton(
        SyncCoordinator,
        config=config,
        aws_path=aws_path,
        parser=parser,
        validator=validator,
        scheduler=scheduler,
        environ=environ,
    )
