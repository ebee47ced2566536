"""Configuration management."""

import logging
from pathlib import Path
from typing import Optional

import platformdirs
import tomli
import tomli_w
from pydantic import ValidationError

from rtotrack.exceptions import ConfigValidationError
from rtotrack.models import AppConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages the TOML configuration file and default data locations."""

    CONFIG_FILENAME = "config.toml"
    DATABASE_FILENAME = "records.db"

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        data_dir: Optional[Path] = None,
    ) -> None:
        """Initialize config manager.

        Args:
            config_dir: Override config directory (for testing)
            data_dir: Override directory of the default SQLite file
        """
        if config_dir:
            self._config_dir = Path(config_dir)
        else:
            self._config_dir = Path(platformdirs.user_config_dir("rtotrack"))
        if data_dir:
            self._data_dir = Path(data_dir)
        elif config_dir:
            self._data_dir = Path(config_dir)
        else:
            self._data_dir = Path(platformdirs.user_data_dir("rtotrack"))

    @property
    def config_path(self) -> Path:
        """Path to config file."""
        return self._config_dir / self.CONFIG_FILENAME

    @property
    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    def save(self, config: AppConfig) -> None:
        """Write configuration as TOML.

        Args:
            config: Configuration to save
        """
        self._config_dir.mkdir(parents=True, exist_ok=True)
        config_dict = config.model_dump(mode="json", exclude_none=True)
        self.config_path.write_text(tomli_w.dumps(config_dict), encoding="utf-8")
        logger.debug("Config saved to %s", self.config_path)

    def load(self) -> AppConfig:
        """Load configuration, falling back to defaults when no file exists.

        Returns:
            Validated AppConfig

        Raises:
            ConfigValidationError: If the file is not valid TOML or fails validation
        """
        if not self.exists:
            logger.debug("No config at %s, using defaults", self.config_path)
            return AppConfig()

        try:
            config_dict = tomli.loads(self.config_path.read_text(encoding="utf-8"))
        except tomli.TOMLDecodeError as e:
            raise ConfigValidationError("config", f"{self.config_path}: {e}")

        try:
            return AppConfig.model_validate(config_dict)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or "config"
            raise ConfigValidationError(field, first["msg"])

    def database_url(self, config: AppConfig) -> str:
        """Database URL from config, or the default SQLite file."""
        if config.database_url:
            return config.database_url
        self._data_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{self._data_dir / self.DATABASE_FILENAME}"
