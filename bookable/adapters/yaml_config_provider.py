"""
Config provider backed by the YAML application config file.
"""

import logging
from pathlib import Path

from ..config import AppConfig
from ..domain.exceptions import MissingBusinessConfig
from ..domain.models import BusinessCalendarConfig

logger = logging.getLogger(__name__)


class YamlConfigProvider:
    """
    Supplies the business calendar snapshot from a config.yaml file.

    The file is re-read on every call so each availability query sees the
    current settings.
    """

    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)

    def load(self) -> AppConfig:
        """Load and validate the full application config."""
        return AppConfig.load_from_yaml(self.config_path)

    def get_business_calendar_config(self) -> BusinessCalendarConfig:
        """
        Return the business calendar configuration.

        Raises:
            MissingBusinessConfig: If the file or its business section is missing
        """
        try:
            app_config = self.load()
        except FileNotFoundError as exc:
            raise MissingBusinessConfig(f"No config file at {self.config_path}") from exc

        calendar_config = app_config.to_calendar_config()
        if calendar_config is None:
            raise MissingBusinessConfig(
                f"Config file {self.config_path} has no 'business' section"
            )

        logger.debug("Loaded business hours from %s", self.config_path)
        return calendar_config
