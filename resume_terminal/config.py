"""Runtime settings.

Defaults can be overridden by an optional YAML file, then by environment
variables, then by command-line flags (see ``__main__``).
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "resume_terminal.yaml"

ENV_RESUME = "RESUME_TERMINAL_RESUME"
ENV_LOG_LEVEL = "RESUME_TERMINAL_LOG_LEVEL"
ENV_NO_COLOUR = "RESUME_TERMINAL_NO_COLOUR"


@dataclass(frozen=True)
class Settings:
    # None means the sample resume bundled with the package
    resume_path: Optional[str] = None
    prompt: str = "guest@resume:{cwd}$ "
    colour: bool = True
    log_level: str = "WARNING"


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings(path: str = DEFAULT_CONFIG_PATH,
                  environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from ``path`` (if it exists) and the environment.

    Unknown keys in the file are ignored with a warning. A file that cannot
    be read or parsed, or whose top level is not a mapping, is logged and
    the defaults are used instead.
    """
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("could not read settings file %s: %s", path, e)
            data = {}
        if not isinstance(data, dict):
            logger.warning("settings file %s is not a mapping; using defaults", path)
            data = {}
        known = {f.name for f in fields(Settings)}
        for key, value in data.items():
            if key in known:
                values[key] = value
            else:
                logger.warning("ignoring unknown setting %r in %s", key, path)
    settings = Settings(**values)

    if environ.get(ENV_RESUME):
        settings = replace(settings, resume_path=environ[ENV_RESUME])
    if environ.get(ENV_LOG_LEVEL):
        settings = replace(settings, log_level=environ[ENV_LOG_LEVEL].upper())
    if environ.get(ENV_NO_COLOUR) and _truthy(environ[ENV_NO_COLOUR]):
        settings = replace(settings, colour=False)
    return settings
