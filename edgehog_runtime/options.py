"""Runtime configuration options."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

MAX_OTA_OPERATION = 2


class ConfigError(ValueError):
    """Raised when the configuration is missing or malformed."""


class AstarteLibrary(Enum):
    """The library used to talk to Astarte."""

    ASTARTE_DEVICE_SDK = "astarte-device-sdk"
    ASTARTE_MESSAGE_HUB = "astarte-message-hub"

    @classmethod
    def parse(cls, value: str) -> AstarteLibrary:
        """Parse the configuration name of a library."""
        try:
            return cls(value)
        except ValueError:
            names = ", ".join(member.value for member in cls)
            raise ConfigError(
                f"unknown astarte_library {value!r}, expected one of: {names}"
            ) from None


def _path(data: Mapping[str, Any], key: str) -> Path:
    try:
        value = data[key]
    except KeyError:
        raise ConfigError(f"missing field {key!r}") from None
    if not isinstance(value, (str, Path)):
        raise ConfigError(f"field {key!r} must be a path string")
    return Path(value)


def _section(data: Mapping[str, Any], key: str) -> dict[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ConfigError(f"field {key!r} must be a table")
    return dict(value)


@dataclass
class DeviceManagerOptions:
    """Options controlling the device runtime."""

    astarte_library: AstarteLibrary
    interfaces_directory: Path
    store_directory: Path
    download_directory: Path
    astarte_device_sdk: dict[str, Any] | None = None
    astarte_message_hub: dict[str, Any] | None = None
    telemetry_config: list[Any] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DeviceManagerOptions:
        """Build options from a parsed configuration document."""
        if not isinstance(data, Mapping):
            raise ConfigError("configuration must be a table")
        if "astarte_library" not in data:
            raise ConfigError("missing field 'astarte_library'")
        library = data["astarte_library"]
        if not isinstance(library, str):
            raise ConfigError("field 'astarte_library' must be a string")

        telemetry = data.get("telemetry_config")
        if telemetry is not None:
            if not isinstance(telemetry, list):
                raise ConfigError("field 'telemetry_config' must be a list")
            telemetry = list(telemetry)

        return cls(
            astarte_library=AstarteLibrary.parse(library),
            interfaces_directory=_path(data, "interfaces_directory"),
            store_directory=_path(data, "store_directory"),
            download_directory=_path(data, "download_directory"),
            astarte_device_sdk=_section(data, "astarte_device_sdk"),
            astarte_message_hub=_section(data, "astarte_message_hub"),
            telemetry_config=telemetry,
        )