"""Client configuration for vehiclemate."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from vehiclemate._constants import (
    BASE_URL,
    DEFAULT_CURRENCY,
    LOGIN_ENDPOINT,
    REMINDER_WINDOW_DAYS,
    SYNC_ENDPOINT,
)
from vehiclemate.exceptions import ConfigError


def _default_data_dir() -> Path:
    return Path.home() / ".vehiclemate"


def _env_number(env_key: str, value: str, kind: type[int] | type[float]) -> int | float:
    try:
        return kind(value)
    except ValueError as exc:
        raise ConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class VehicleMateConfig:
    """Library configuration.

    Parameters
    ----------
    base_url : str
        Base URL of the remote authority (no trailing slash needed).
    sync_endpoint : str
        Path of the full-snapshot sync exchange.
    login_endpoint : str
        Path of the login exchange.
    data_dir : Path
        Directory used by the JSON-file storage backend.
    request_timeout : float
        Total timeout in seconds for one HTTP exchange.  A timeout is
        reported the same way as a server error.
    reminder_window_days : int
        Expiries at most this many days away produce a dashboard reminder.
    currency : str
        Display currency code, copied onto every :class:`Dashboard`.
    """

    base_url: str = BASE_URL
    sync_endpoint: str = SYNC_ENDPOINT
    login_endpoint: str = LOGIN_ENDPOINT
    data_dir: Path = dataclasses.field(default_factory=_default_data_dir)
    request_timeout: float = 30.0
    reminder_window_days: int = REMINDER_WINDOW_DAYS
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise ConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.reminder_window_days < 0:
            raise ConfigError(f"reminder_window_days must be >= 0, got {self.reminder_window_days}")
        if not isinstance(self.data_dir, Path):
            object.__setattr__(self, "data_dir", Path(self.data_dir))

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    @classmethod
    def from_env(cls, **overrides: Any) -> VehicleMateConfig:
        """Create configuration from environment variables.

        Reads optional ``VEHICLEMATE_*`` variables.  Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        VehicleMateConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "VEHICLEMATE_BASE_URL": "base_url",
            "VEHICLEMATE_SYNC_ENDPOINT": "sync_endpoint",
            "VEHICLEMATE_LOGIN_ENDPOINT": "login_endpoint",
            "VEHICLEMATE_CURRENCY": "currency",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        data_dir_env = env.get("VEHICLEMATE_DATA_DIR")
        if data_dir_env:
            config_kwargs["data_dir"] = Path(data_dir_env).expanduser()

        # numeric fields, handled separately
        timeout_env = env.get("VEHICLEMATE_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_number("VEHICLEMATE_REQUEST_TIMEOUT", timeout_env, float)

        window_env = env.get("VEHICLEMATE_REMINDER_WINDOW_DAYS")
        if window_env is not None and "reminder_window_days" not in overrides:
            config_kwargs["reminder_window_days"] = _env_number(
                "VEHICLEMATE_REMINDER_WINDOW_DAYS",
                window_env,
                int,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
