"""Settings for the interactive session and the command line runner."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

PROMPT_ENV_VAR = "MONKEY_PROMPT"
DEFAULT_PROMPT = ">> "
DEFAULT_MAX_ERRORS = 20


@dataclass
class ReplConfig:
    """
    Settings for a Monkey session.

    Resolved lowest to highest: defaults, a YAML file, the MONKEY_PROMPT
    environment variable, then whatever the caller overrides explicitly.
    """

    prompt: str = DEFAULT_PROMPT
    max_errors: int = DEFAULT_MAX_ERRORS
    show_banner: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ReplConfig":
        """Build a config from a mapping, ignoring keys it does not know."""
        known = {f.name for f in fields(cls)}
        config = cls(**{k: v for k, v in data.items() if k in known})
        if not isinstance(config.max_errors, int) or config.max_errors < 1:
            raise ValueError(f"max_errors must be a positive integer, got {config.max_errors!r}")
        return config

    @classmethod
    def load(cls, path: Optional[Path | str] = None,
             environ: Optional[Mapping[str, str]] = None) -> "ReplConfig":
        data: Dict[str, Any] = {}
        if path is not None:
            config_path = Path(path)
            if not config_path.exists():
                raise FileNotFoundError(f"config not found: {config_path}")
            with config_path.open("r", encoding="utf-8") as fp:
                loaded = yaml.safe_load(fp) or {}
            if not isinstance(loaded, dict):
                raise ValueError(f"config must be a mapping: {config_path}")
            data.update(loaded)

        env = os.environ if environ is None else environ
        if PROMPT_ENV_VAR in env:
            data["prompt"] = env[PROMPT_ENV_VAR]

        return cls.from_mapping(data)

    def with_overrides(self, **overrides: Any) -> "ReplConfig":
        """Copy with every non-None override applied."""
        data = asdict(self)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return type(self).from_mapping(data)

    def save(self, path: Path | str) -> None:
        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w", encoding="utf-8") as fp:
            yaml.safe_dump(asdict(self), fp, sort_keys=False)
