"""Load a resume file from disk and validate it."""

import json
import logging
import os
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .models import ResumeDocument

logger = logging.getLogger(__name__)

# Sample resume shipped with the package; used when nothing else is configured.
DEFAULT_RESUME_PATH = os.path.join(os.path.dirname(__file__), "data", "resume.yaml")


def _read_raw(path: str) -> Any:
    """Parse ``path`` as YAML (``.yaml``/``.yml``) or JSON (anything else)."""
    with open(path, "r", encoding="utf-8") as f:
        if path.lower().endswith((".yaml", ".yml")):
            return yaml.safe_load(f)
        return json.load(f)


def load_resume(path: Optional[str] = None) -> Optional[ResumeDocument]:
    """Read and validate the resume at ``path``.

    Returns ``None`` when the file is missing, cannot be parsed or does not
    match the resume schema. The cause is logged; the terminal is expected to
    keep running with an empty filesystem in that case.
    """
    path = path or DEFAULT_RESUME_PATH
    if not os.path.exists(path):
        logger.error("resume file not found: %s", path)
        return None
    try:
        raw = _read_raw(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        # json.JSONDecodeError is a ValueError
        logger.error("could not parse resume file %s: %s", path, e)
        return None
    try:
        return ResumeDocument.model_validate(raw)
    except ValidationError as e:
        logger.error("resume file %s failed validation: %s", path, e)
        return None
