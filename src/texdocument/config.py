"""Configuration loader.

Reads project settings from a YAML config file with ``${ENV_VAR}``
interpolation; a ``.env`` file in the working directory is loaded first.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .models import DocumentMode, ProjectConfig

load_dotenv()

# ---------------------------------------------------------------------------
# YAML loading with ${ENV_VAR} interpolation
# ---------------------------------------------------------------------------

_ENV_RE = re.compile(r"\$\{([^}]+)\}")


def _resolve_env_vars(value: Any) -> Any:
    """Recursively resolve ``${ENV_VAR}`` references in strings."""
    if isinstance(value, str):
        return _ENV_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve_env_vars(v) for v in value]
    return value


def load_config(config_path: str | Path) -> ProjectConfig:
    """Load a ``ProjectConfig`` from a YAML file.

    Environment variables referenced as ``${VAR_NAME}`` are resolved; unset
    variables become empty strings, which the engine fields treat as "use
    the mode's default".
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    resolved = _resolve_env_vars(raw)
    return ProjectConfig.model_validate(resolved)


def document_kwargs(config: ProjectConfig) -> dict[str, Any]:
    """Keyword arguments that apply the configured defaults to a new document."""
    defaults = config.document
    kwargs: dict[str, Any] = {
        "mode": DocumentMode.TUFTE if defaults.tufte else DocumentMode.STANDARD,
        "auto_sections": defaults.auto_sections,
        "toc": defaults.toc,
    }
    if defaults.packages:
        from .document import DEFAULT_PACKAGES

        kwargs["packages"] = [*DEFAULT_PACKAGES, *defaults.packages]
    return kwargs
