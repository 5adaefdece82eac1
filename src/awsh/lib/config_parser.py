"""Configuration parser for the shell.

Settings come from an optional YAML file, then the standard AWS environment
variables, then explicit command line overrides (highest precedence).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-2"
DEFAULT_PROFILE = "default"
DEFAULT_CONFIG_PATH = Path.home() / ".awsh.yaml"
OUTPUT_FORMATS = ("table", "json")


class ShellConfig(BaseModel):
    """Validated shell settings."""
    profile: Optional[str] = None
    region: str = DEFAULT_REGION
    output: str = "table"
    prompt: str = "aws [{profile}|{region}]> "
    history_file: Path = Field(default_factory=lambda: Path.home() / ".awsh_history")
    history_length: int = 1000

    @field_validator('output')
    @classmethod
    def validate_output(cls, v: str) -> str:
        """Ensure output format is known."""
        v = v.lower()
        if v not in OUTPUT_FORMATS:
            raise ValueError(f"Output must be one of {list(OUTPUT_FORMATS)}, got '{v}'")
        return v

    @field_validator('region')
    @classmethod
    def validate_region(cls, v: str) -> str:
        """Reject blank regions."""
        if not v.strip():
            raise ValueError("Region must not be empty")
        return v.strip()

    @field_validator('history_length')
    @classmethod
    def validate_history_length(cls, v: int) -> int:
        """History length cannot be negative."""
        if v < 0:
            raise ValueError("history_length must be >= 0")
        return v

    @property
    def effective_profile(self) -> str:
        """Profile name shown to the user."""
        return self.profile or DEFAULT_PROFILE

    def render_prompt(self) -> str:
        """Format the prompt template with profile and region."""
        return self.prompt.format(profile=self.effective_profile, region=self.region)


class ConfigParser:
    """Parse and validate shell configuration."""

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """Initialize parser.

        Args:
            config_path: Explicit YAML file; must exist when given.
                Falls back to ``~/.awsh.yaml`` when present.
            environ: Environment mapping (defaults to ``os.environ``)
        """
        if config_path is not None:
            self.config_path: Optional[Path] = Path(config_path)
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
        elif DEFAULT_CONFIG_PATH.exists():
            self.config_path = DEFAULT_CONFIG_PATH
        else:
            self.config_path = None

        self.environ = os.environ if environ is None else environ
        self.config: Optional[ShellConfig] = None
        self._raw_config: Dict[str, Any] = {}

    def parse(self, **overrides: Any) -> ShellConfig:
        """Parse and validate configuration.

        Args:
            **overrides: Values that win over file and environment
                (``None`` values are ignored)

        Returns:
            Validated configuration object

        Raises:
            yaml.YAMLError: If YAML parsing fails
            pydantic.ValidationError: If validation fails
        """
        if self.config_path is not None:
            with open(self.config_path) as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ValueError(f"Configuration must be a mapping: {self.config_path}")
            self._raw_config = loaded
            logger.debug(f"Loaded configuration from {self.config_path}")

        data = dict(self._raw_config)
        data.update(self._environment_settings())
        data.update({k: v for k, v in overrides.items() if v is not None})

        self.config = ShellConfig(**data)
        return self.config

    def _environment_settings(self) -> Dict[str, str]:
        """Settings taken from AWS_PROFILE / AWS_REGION / AWS_DEFAULT_REGION."""
        settings = {}
        profile = self.environ.get("AWS_PROFILE")
        if profile:
            settings["profile"] = profile
        region = self.environ.get("AWS_REGION") or self.environ.get("AWS_DEFAULT_REGION")
        if region:
            settings["region"] = region
        return settings


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> ShellConfig:
    """Load and validate shell configuration.

    Args:
        config_path: Optional YAML file
        environ: Environment mapping (defaults to ``os.environ``)
        **overrides: Explicit settings (e.g. from command line flags)

    Returns:
        Parsed configuration

    Example:
        >>> config = load_config(region="eu-west-1")
        >>> config.render_prompt()
        'aws [default|eu-west-1]> '
    """
    parser = ConfigParser(config_path, environ=environ)
    return parser.parse(**overrides)
