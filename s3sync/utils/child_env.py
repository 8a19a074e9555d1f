import os
from typing import Dict, Mapping, Optional

# Ambient credentials must never mix with the pasted ones.
_SHADOWED_VARIABLES = (
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_PROFILE",
)


def child_env(
    overrides: Mapping[str, str], base: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """
    Build the environment for a child process without touching our own.
    Args:
        overrides (Mapping): Variables to set in the child.
        base (Mapping): Starting environment, os.environ by default.
    Returns:
        dict: A fresh environment mapping.
    """
    source = os.environ if base is None else base
    env = {k: v for k, v in source.items() if k not in _SHADOWED_VARIABLES}
    env.update(overrides)
    return env
