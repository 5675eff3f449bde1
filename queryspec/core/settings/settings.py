from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    PRODUCTION: bool = False

    TESTING: bool = False

    LOG_CONFIG_OVERRIDE: Path | None = None
    """ path to custom logging configuration file"""

    LOG_LEVEL: str = "info"
    """ corresponds to standard Python Log levels """

    # ===============================================
    # Specification Config

    DEFAULT_ORDER_DIRECTION: Literal["asc", "desc"] = "asc"
    """direction used by the sort parsers when an entry does not name one (ex. `title` instead of `title:desc`)"""

    DECAMELIZE_ATTRIBUTES: bool = True
    """attribute names coming from a request are converted from camelCase (`releaseYear` becomes `release_year`)"""

    DEFAULT_JOIN_TYPE: Literal["left", "inner"] = "left"
    """join type used when an attribute path crosses a relationship"""

    @field_validator("DEFAULT_ORDER_DIRECTION", "DEFAULT_JOIN_TYPE", mode="before")
    @classmethod
    def lower_case_choice(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v

    model_config = SettingsConfigDict(extra="allow")


def app_settings_constructor(
    production: bool,
    env_file: Path,
    env_encoding="utf-8",
) -> AppSettings:
    """
    app_settings_constructor is a factory function that returns an AppSettings object.
    AppSettings should not be instantiated directly, but rather
    through this factory function
    """

    return AppSettings(
        _env_file=env_file,  # type: ignore
        _env_file_encoding=env_encoding,  # type: ignore
        **{"PRODUCTION": production},
    )
