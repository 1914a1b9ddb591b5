# Task board server: configuration
# Override via a YAML file, environment variables or CLI args.

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigError

CONFIG_PATH = Path.cwd() / "taskboard.yaml"


@dataclass
class BoardConfig:
    """Runtime configuration for the task board server."""

    # Network
    host: str = "127.0.0.1"
    port: int = 3000

    # Board
    seed_examples: bool = True  # start with one example card per column

    # Behavior
    log_level: str = "INFO"
    debug: bool = False

    def apply_env(self, environ=None):
        """Override fields from TASKBOARD_* (and PORT) environment variables."""
        env = os.environ if environ is None else environ
        if env.get("TASKBOARD_HOST"):
            self.host = env["TASKBOARD_HOST"]
        port = env.get("TASKBOARD_PORT") or env.get("PORT")
        if port:
            self.port = port
        if env.get("TASKBOARD_LOG_LEVEL"):
            self.log_level = env["TASKBOARD_LOG_LEVEL"]

    def check(self):
        """Coerce and validate fields, raising ConfigError on bad values."""
        try:
            self.port = int(self.port)
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid port: {self.port!r}")
        if not 0 < self.port < 65536:
            raise ConfigError(f"Port out of range: {self.port}")

        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigError(f"Unknown log level: {self.log_level}")

    @classmethod
    def load(cls, path: Optional[str] = None, environ=None) -> "BoardConfig":
        """Load config from YAML file, falling back to defaults."""
        env = os.environ if environ is None else environ
        path = path or env.get("TASKBOARD_CONFIG")
        cfg_path = Path(path) if path else CONFIG_PATH
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
                cfg = cls(**{k: v for k, v in data.items() if hasattr(cls, k)})
            except (OSError, yaml.YAMLError, AttributeError, TypeError):
                cfg = cls()
        else:
            cfg = cls()
        cfg.apply_env(env)
        cfg.check()
        return cfg
