"""Environment-driven configuration for the pipeline."""

import os
from pathlib import Path
from typing import List, Mapping, Optional

ENVIRONMENT_VARIABLES = ("APPDEF_ENVIRONMENT", "ASPNETCORE_ENVIRONMENT", "DOTNET_ENVIRONMENT")
LOG_LEVEL_VARIABLE = "APPDEF_LOG_LEVEL"


def resolve_environment(explicit: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> str:
    """Explicit value first, then the first non-empty environment variable."""
    if explicit:
        return explicit.strip()
    env = os.environ if env is None else env
    for variable in ENVIRONMENT_VARIABLES:
        value = (env.get(variable) or "").strip()
        if value:
            return value
    return ""


def overlay_paths(settings_path: str, environment: str) -> List[str]:
    """``appsettings.json`` + ``Staging`` -> ``[appsettings.Staging.json]``."""
    if not environment:
        return []
    path = Path(settings_path)
    return [str(path.with_name(f"{path.stem}.{environment}{path.suffix}"))]


def resolve_log_level(verbose: bool = False, env: Optional[Mapping[str, str]] = None) -> str:
    if verbose:
        return "DEBUG"
    env = os.environ if env is None else env
    return (env.get(LOG_LEVEL_VARIABLE) or "WARNING").strip().upper()
