"""Environment variable substitution for release files."""

import os
import re
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def load_env_file(directory: Path) -> bool:
    """Load `<directory>/.env` without overriding variables already set.

    Returns:
        True if a .env file was found and loaded
    """
    env_file = directory / ".env"
    if not env_file.is_file():
        return False
    logger.debug(f"Loading environment from {env_file}")
    return load_dotenv(env_file, override=False)


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message
    """

    def replacer(match: re.Match[str]) -> str:
        var_expr = match.group(1)

        # Handle default values: ${VAR:-default}
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)

        # Handle error messages: ${VAR:?message}
        elif ":?" in var_expr:
            var_name, error_msg = var_expr.split(":?", 1)
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name}: {error_msg}")
            return value

        # Handle required variables: ${VAR}
        else:
            var_name = var_expr
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name} not set")
            return value

    return _PLACEHOLDER.sub(replacer, text)
