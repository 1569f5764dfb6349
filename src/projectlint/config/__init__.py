"""Project config discovery: the JSON loader and the unsupported-format check."""

from projectlint.config.loader import (
    CONFIG_FILE_NAME,
    ConfigLoader,
    display_path,
)
from projectlint.config.unsupported import UNSUPPORTED_CONFIG_FILES, find_unsupported_config

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigLoader",
    "UNSUPPORTED_CONFIG_FILES",
    "display_path",
    "find_unsupported_config",
]
