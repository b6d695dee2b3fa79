"""Scanner configuration for pycheckin."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pycheckin._constants import (
    DEFAULT_LOOKUP_TIMEOUT,
    DEFAULT_ROSTER_CODE_COLUMN,
    DEFAULT_ROSTER_TABLE,
    DEFAULT_SAMPLE_INTERVAL,
    DEFAULT_SUPPRESSION_WINDOW,
)
from pycheckin.exceptions import CheckInConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise CheckInConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class CameraProfile:
    """Capture device selection.

    ``width``/``height`` of ``0`` keep whatever resolution the driver
    picks by default.
    """

    index: int = 0
    width: int = 0
    height: int = 0

    @property
    def device_path(self) -> str:
        """Device node backing ``index`` on Linux (``/dev/videoN``)."""
        return f"/dev/video{self.index}"


@dataclasses.dataclass(frozen=True)
class CheckInConfig:
    """Scanner configuration.

    Parameters
    ----------
    suppression_window : float
        Seconds during which a repeated decode of the same payload is
        dropped.  Must exceed the re-scan interval of a code held still in
        front of the camera.  Defaults to 2 seconds.
    sample_interval : float
        Seconds between two frame samples of the decode loop.  Must not be
        negative; ``0`` samples back to back.
    stop_on_success : bool
        Default start policy.  ``True`` ends the session after the first
        admitted scan; ``False`` keeps scanning (continuous mode).
    lookup_timeout : float
        Seconds to wait for a roster lookup before classifying it as
        failed.  Set to ``0`` to wait indefinitely.
    camera : CameraProfile
        Capture device selection.
    roster_url : str or None
        Base URL of the remote roster (PostgREST-style REST endpoint).
    roster_api_key : str or None
        API key sent as ``apikey`` and bearer token to the roster.
    roster_table : str
        Table holding the roster rows.
    roster_code_column : str
        Column matched against the scanned code.
    """

    suppression_window: float = DEFAULT_SUPPRESSION_WINDOW
    sample_interval: float = DEFAULT_SAMPLE_INTERVAL
    stop_on_success: bool = False
    lookup_timeout: float = DEFAULT_LOOKUP_TIMEOUT
    camera: CameraProfile = dataclasses.field(default_factory=CameraProfile)
    roster_url: str | None = None
    roster_api_key: str | None = None
    roster_table: str = DEFAULT_ROSTER_TABLE
    roster_code_column: str = DEFAULT_ROSTER_CODE_COLUMN

    def __post_init__(self) -> None:
        if self.suppression_window <= 0:
            raise CheckInConfigError(f"suppression_window must be positive, got {self.suppression_window}")
        if self.sample_interval < 0:
            raise CheckInConfigError(f"sample_interval must not be negative, got {self.sample_interval}")
        if self.lookup_timeout < 0:
            raise CheckInConfigError(f"lookup_timeout must not be negative, got {self.lookup_timeout}")
        if self.camera.index < 0:
            raise CheckInConfigError(f"camera index must not be negative, got {self.camera.index}")

    @classmethod
    def from_env(cls, **overrides: Any) -> CheckInConfig:
        """Create configuration from environment variables.

        Reads the optional ``CHECKIN_*`` variables.  Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        CheckInConfig
            Populated configuration.
        """
        env = os.environ

        camera_kwargs: dict[str, int] = {}
        _ENV_CAMERA_MAP = {
            "CHECKIN_CAMERA_INDEX": "index",
            "CHECKIN_CAMERA_WIDTH": "width",
            "CHECKIN_CAMERA_HEIGHT": "height",
        }
        for env_key, field_name in _ENV_CAMERA_MAP.items():
            val = env.get(env_key)
            if val is not None:
                camera_kwargs[field_name] = int(_env_number(env_key, val, int))

        camera_overrides = overrides.pop("camera", None)
        if isinstance(camera_overrides, dict):
            camera_kwargs.update(camera_overrides)
        elif isinstance(camera_overrides, CameraProfile):
            camera_kwargs = dataclasses.asdict(camera_overrides)

        camera = CameraProfile(**camera_kwargs) if camera_kwargs else CameraProfile()

        _ENV_CONFIG_MAP = {
            "CHECKIN_ROSTER_URL": "roster_url",
            "CHECKIN_ROSTER_API_KEY": "roster_api_key",
            "CHECKIN_ROSTER_TABLE": "roster_table",
            "CHECKIN_ROSTER_CODE_COLUMN": "roster_code_column",
        }
        config_kwargs: dict[str, Any] = {"camera": camera}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_FLOAT_MAP = {
            "CHECKIN_SUPPRESSION_WINDOW": "suppression_window",
            "CHECKIN_SAMPLE_INTERVAL": "sample_interval",
            "CHECKIN_LOOKUP_TIMEOUT": "lookup_timeout",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = float(_env_number(env_key, val, float))

        if "stop_on_success" not in overrides:
            config_kwargs["stop_on_success"] = _env_bool(env.get("CHECKIN_STOP_ON_SUCCESS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
