"""Configuration loader for the Lux API client

Values resolve with the following priority:
1. Environment variables (highest priority)
2. .env file
3. Hardcoded defaults (lowest priority)

An environment value that cannot be used (wrong type, out of range, not
one of the allowed choices) is reported and replaced by the default, so a
typo in ``.env`` never stops the client from starting.
"""

import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional, Union
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

Number = Union[int, float]


class ConfigLoader:
    """Resolves typed settings from the environment and an optional .env file"""

    def __init__(self, env_path: Optional[str] = None):
        """
        Args:
            env_path: Optional path to .env file.
                     Defaults to '.env' in the current directory.
        """
        self.env_path = Path(env_path) if env_path else Path(".env")
        self._load_env_file()

    def _load_env_file(self):
        if self.env_path.exists():
            # Variables already exported in the shell take precedence
            load_dotenv(dotenv_path=self.env_path, override=False)
            logger.debug(f"Loaded environment variables from {self.env_path}")
        else:
            logger.debug(f".env file not found at {self.env_path}, using environment variables and defaults only")

    @staticmethod
    def _expand(value: Any) -> Any:
        if isinstance(value, str) and value.startswith("~/"):
            return str(Path(value).expanduser())
        return value

    def _convert(self, raw: str, default: Any) -> Any:
        """Parse ``raw`` into the type of ``default``; ValueError if it does not fit"""
        if isinstance(default, bool):
            lowered = raw.strip().lower()
            if lowered in ("true", "1", "yes", "on"):
                return True
            if lowered in ("false", "0", "no", "off", ""):
                return False
            raise ValueError(f"expected a boolean, got {raw!r}")
        if isinstance(default, int):
            return int(raw)
        if isinstance(default, float):
            return float(raw)
        return self._expand(raw)

    def get(
        self,
        env_var: str,
        default: Any,
        minimum: Optional[Number] = None,
        choices: Optional[Iterable[str]] = None,
    ) -> Any:
        """Get a configuration value with priority: env > default

        The type of ``default`` decides how an environment string is parsed.

        Args:
            env_var: Environment variable name to check
            default: Value used when the variable is unset or unusable
            minimum: Smallest accepted value for numeric settings
            choices: Accepted values (case-insensitive) for string settings

        Returns:
            The configuration value from environment or default
        """
        raw = os.getenv(env_var)
        if raw is None:
            return self._expand(default)

        try:
            value = self._convert(raw, default)
        except ValueError:
            logger.warning(f"Failed to parse {env_var}={raw} as {type(default).__name__}, using default: {default}")
            return self._expand(default)

        if minimum is not None and value < minimum:
            logger.warning(f"{env_var}={raw} is below the minimum of {minimum}, using default: {default}")
            return default

        if choices is not None:
            allowed = [c.lower() for c in choices]
            if value.lower() not in allowed:
                logger.warning(f"{env_var}={raw} is not one of {', '.join(allowed)}, using default: {default}")
                return default
            value = value.lower()

        return value


_config_loader = None

def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
