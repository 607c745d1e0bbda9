"""Runtime settings read from SNAPDISH_* environment variables."""

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

from snapdish.constants import MIN_INGREDIENTS
from snapdish.rules import SessionRules


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SNAPDISH_")

    server_base_url: str = "http://127.0.0.1:3000"
    request_timeout: float = 15.0
    poll_interval: float = 10.0
    min_ingredients: int = MIN_INGREDIENTS
    host_only_generation: bool = False
    results_delay: float = 0.6
    log_level: str = "INFO"

    def rules(self) -> SessionRules:
        return SessionRules(
            min_ingredients=self.min_ingredients,
            host_only_generation=self.host_only_generation,
        )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
