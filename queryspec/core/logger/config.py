"""
Logging configuration for queryspec.

Each run mode has a dictConfig JSON file next to this module. `${NAME}`
placeholders in a file are replaced before it is parsed (the root logger passes
`LOG_LEVEL`). A custom file can replace the bundled ones through the
`LOG_CONFIG_OVERRIDE` setting.
"""
import json
import logging
import pathlib
import typing
from logging import config as logging_config

LOGGER_NAME = "queryspec"

__dir = pathlib.Path(__file__).parent
__conf: dict[str, typing.Any] | None = None

MODE_CONFIG_FILES: dict[str, str] = {
    "production": "logconf.prod.json",
    "development": "logconf.dev.json",
    "testing": "logconf.test.json",
}


def _log_config(path: pathlib.Path, substitutions: dict[str, str] | None = None) -> dict[str, typing.Any]:
    """
    Reads a dictConfig JSON file, applying `substitutions` to its raw text first.

    Args:
        path (pathlib.Path): The JSON configuration file.
        substitutions (dict[str, str] | None, optional): Placeholder name to value.

    Returns:
        dict[str, typing.Any]: The parsed configuration.
    """
    contents = path.read_text()
    for key, value in (substitutions or {}).items():
        contents = contents.replace(f"${{{key}}}", value)
    return json.loads(contents)


def _config_path(mode: str, config_override: pathlib.Path | None) -> pathlib.Path:
    if config_override:
        if not config_override.is_file():
            raise ValueError(f"Logging config override '{config_override}' does not exist")
        return config_override

    try:
        return __dir / MODE_CONFIG_FILES[mode]
    except KeyError as e:
        raise ValueError(f"Invalid mode: {mode}, expected one of {list(MODE_CONFIG_FILES)}") from e


def log_config() -> dict[str, typing.Any]:
    """Returns the configuration applied by the last `configured_logger` call."""
    if __conf is None:
        raise ValueError("Logger not configured, must call configured_logger first")
    return __conf


def configured_logger(
    *,
    mode: str,
    config_override: pathlib.Path | None = None,
    substitutions: dict[str, str] | None = None,
) -> logging.Logger:
    """
    Applies the logging configuration for `mode` and returns the queryspec logger.

    Args:
        mode (str): production, development or testing
        config_override (pathlib.Path, optional): Custom dictConfig JSON used instead of the mode's file.
        substitutions (dict[str, str], optional): Placeholder values for the configuration file.

    Raises:
        ValueError: For an unknown mode or a missing override file.
    """
    global __conf

    __conf = _log_config(_config_path(mode, config_override), substitutions)
    logging_config.dictConfig(config=__conf)
    return logging.getLogger(LOGGER_NAME)
