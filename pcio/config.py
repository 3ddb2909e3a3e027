"""
Build configuration for pcio.

Paths default to the fixed project layout:

  template.json              widget template
  images/                    assets (rules pages are rendered here too)
  rules.md                   rules document
  fonts/verdana.woff         regular weight
  fonts/verdana-bold.woff    bold weight
  output.pcio                archive

Each path can be overridden, lowest to highest precedence, by:
  1. pcio.yml in the project directory
  2. PCIO_* variables from a .env file in the project directory
  3. PCIO_* environment variables
  4. explicit overrides (CLI options)

Relative paths resolve against the project directory.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import jsonschema
import yaml
from dotenv import dotenv_values

from pcio.errors import PcioError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "pcio.yml"
ENV_FILENAME = ".env"

DEFAULTS = {
    "template": "template.json",
    "images_dir": "images",
    "rules": "rules.md",
    "font_regular": "fonts/verdana.woff",
    "font_bold": "fonts/verdana-bold.woff",
    "output": "output.pcio",
}

ENV_VARS = {
    "template": "PCIO_TEMPLATE",
    "images_dir": "PCIO_IMAGES_DIR",
    "rules": "PCIO_RULES",
    "font_regular": "PCIO_FONT_REGULAR",
    "font_bold": "PCIO_FONT_BOLD",
    "output": "PCIO_OUTPUT",
}

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {key: {"type": "string", "minLength": 1} for key in DEFAULTS},
    "additionalProperties": False,
}


class ConfigError(PcioError):
    """Invalid pcio.yml."""
    pass


def load_config_file(config_path: Path) -> dict:
    """Load and validate pcio.yml. A missing file means no overrides."""
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}

    try:
        jsonschema.validate(data, CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ConfigError(f"{config_path}: {e.message} at {list(e.absolute_path)}") from e

    logger.debug(f"Loaded {config_path}: {sorted(data)}")
    return data


def _env_overrides(project_dir: Path) -> dict:
    env = {}
    env_path = project_dir / ENV_FILENAME
    if env_path.exists():
        env.update({k: v for k, v in dotenv_values(env_path).items() if v})
    env.update({k: v for k, v in os.environ.items() if k in ENV_VARS.values() and v})

    return {key: env[var] for key, var in ENV_VARS.items() if var in env}


@dataclass
class BuildConfig:
    """Resolved input and output paths for one build."""
    project_dir: Path
    template: Path
    images_dir: Path
    rules: Path
    font_regular: Path
    font_bold: Path
    output: Path

    @classmethod
    def load(cls, project_dir: Path = Path("."), **overrides: Optional[object]) -> "BuildConfig":
        """Resolve paths for project_dir. Overrides set to None are ignored."""
        unknown = set(overrides) - set(DEFAULTS)
        if unknown:
            raise TypeError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        values = dict(DEFAULTS)
        values.update(load_config_file(project_dir / CONFIG_FILENAME))
        values.update(_env_overrides(project_dir))
        values.update({k: v for k, v in overrides.items() if v is not None})

        resolved = {key: project_dir / Path(value) for key, value in values.items()}
        return cls(project_dir=project_dir, **resolved)
