"""Central configuration helper for the document expiry dashboard."""

import logging
import os
from typing import Mapping


class HelperConfig:
    """Central configuration helper. Reads all settings from environment variables.

    An explicit ``env`` mapping can be passed instead of the process environment,
    which is how the dashboard is wired up in tests and embedded front ends.
    """

    def __init__(self, logger: logging.Logger, env: Mapping[str, str] | None = None) -> None:
        self._logger = logger
        self._env = env

    def _read(self, key: str) -> str | None:
        source = self._env if self._env is not None else os.environ
        val = source.get(key)
        return val if val else None  # empty string → None

    def get_string_val(self, key: str, default: str | None = None) -> str:
        """Read a string environment variable.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (str | None): Fallback value if the variable is not set.

        Returns:
            str: The resolved value.

        Raises:
            ValueError: If the variable is not set and no default is provided.
        """
        key = key.upper()
        val = self._read(key)
        if val is None and default is None:
            raise ValueError(f"Environment variable '{key}' is not set.")
        return val.strip() if val is not None else default

    def get_number_val(self, key: str, default: float | int | None = None) -> float | int:
        """Read a numeric environment variable.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (float | int | None): Fallback value if the variable is not set.

        Returns:
            float | int: The resolved numeric value.

        Raises:
            ValueError: If the variable is not set and no default is provided.
            ValueError: If the value cannot be parsed as a number.
        """
        key = key.upper()
        raw = self._read(key)
        if raw is None:
            if default is None:
                raise ValueError(f"Environment variable '{key}' is not set.")
            return default
        try:
            return int(raw) if "." not in raw else float(raw)
        except ValueError:
            raise ValueError(f"Environment variable '{key}' is not a valid number: '{raw}'.")

    def get_int_val(self, key: str, default: int | None = None, minimum: int | None = None, maximum: int | None = None) -> int:
        """Read an integer environment variable and clamp it into [minimum, maximum].

        Args:
            key (str): Environment variable name (case-insensitive).
            default (int | None): Fallback value if the variable is not set.
            minimum (int | None): Lower bound, values below are raised to it.
            maximum (int | None): Upper bound, values above are lowered to it.

        Returns:
            int: The resolved and clamped value.

        Raises:
            ValueError: If the variable is not set and no default is provided, or is not an integer.
        """
        val = self.get_number_val(key, default=default)
        if isinstance(val, float) and not val.is_integer():
            raise ValueError(f"Environment variable '{key.upper()}' is not a valid integer: '{val}'.")
        val = int(val)
        if minimum is not None and val < minimum:
            self._logger.warning("Environment variable '%s'=%d is below %d, using %d.", key.upper(), val, minimum, minimum)
            val = minimum
        if maximum is not None and val > maximum:
            self._logger.warning("Environment variable '%s'=%d is above %d, using %d.", key.upper(), val, maximum, maximum)
            val = maximum
        return val

    def get_bool_val(self, key: str, default: bool | None = None) -> bool:
        """Read a boolean environment variable.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (bool | None): Fallback value if the variable is not set.

        Returns:
            bool: The resolved boolean value.

        Raises:
            ValueError: If the variable is not set and no default is provided.
        """
        key = key.upper()
        raw = self._read(key)
        if raw is None:
            if default is None:
                raise ValueError(f"Environment variable '{key}' is not set.")
            return default
        return raw.strip().lower() in ("true", "1", "yes")

    def get_logger(self) -> logging.Logger:
        """Return the application logger.

        Returns:
            logging.Logger: The configured logger instance.
        """
        return self._logger
