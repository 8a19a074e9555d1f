import os
import shutil
from typing import Optional

from loguru import logger

from s3sync.exceptions.tool_exceptions import MissingToolException


def locate_tool(name: str, override: Optional[str] = None) -> str:
    """
    Find an external command.
    Args:
        name (str): The command to look for on PATH.
        override (str): An explicit path or command name taking precedence over name.
    Returns:
        str: The absolute path of the executable.
    Raises:
        MissingToolException: If the command cannot be found or is not executable.
    """
    candidate = override or name
    path = shutil.which(candidate)
    if path is None:
        raise MissingToolException(candidate)

    path = os.path.abspath(path)
    logger.debug(f"Resolved `{name}` to {path}")
    return path
