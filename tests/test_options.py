from pathlib import Path

import pytest

from edgehog_runtime.options import (
    AstarteLibrary,
    ConfigError,
    DeviceManagerOptions,
)


def _base():
    return {
        "astarte_library": "astarte-device-sdk",
        "interfaces_directory": "/tmp/interfaces",
        "store_directory": "/tmp/store",
        "download_directory": "/tmp/download",
    }


def test_parse_library_names():
    assert AstarteLibrary.parse("astarte-device-sdk") is AstarteLibrary.ASTARTE_DEVICE_SDK
    assert AstarteLibrary.parse("astarte-message-hub") is AstarteLibrary.ASTARTE_MESSAGE_HUB


def test_parse_library_round_trip():
    for member in AstarteLibrary:
        assert AstarteLibrary.parse(member.value) is member


def test_parse_unknown_library():
    with pytest.raises(ConfigError):
        AstarteLibrary.parse("astarte_device_sdk")


def test_from_dict_minimal():
    data = _base()
    options = DeviceManagerOptions.from_dict(data)
    assert options.astarte_library is AstarteLibrary.ASTARTE_DEVICE_SDK
    assert options.interfaces_directory == Path(data["interfaces_directory"])
    assert options.store_directory == Path(data["store_directory"])
    assert options.download_directory == Path(data["download_directory"])
    assert options.astarte_device_sdk is None
    assert options.astarte_message_hub is None
    assert options.telemetry_config is None


def test_from_dict_sections():
    data = _base()
    sdk = {"realm": "", "device_id": "device_id", "credentials_secret": "secret"}
    data["astarte_device_sdk"] = sdk
    data["telemetry_config"] = []
    data["unknown_field"] = 1
    options = DeviceManagerOptions.from_dict(data)
    assert options.astarte_device_sdk == sdk
    assert options.telemetry_config == []


@pytest.mark.parametrize(
    "key",
    ["astarte_library", "interfaces_directory", "store_directory", "download_directory"],
)
def test_from_dict_missing_field(key):
    data = _base()
    del data[key]
    with pytest.raises(ConfigError):
        DeviceManagerOptions.from_dict(data)


def test_from_dict_bad_library():
    data = _base()
    data["astarte_library"] = "nope"
    with pytest.raises(ConfigError):
        DeviceManagerOptions.from_dict(data)


def test_from_dict_bad_types():
    data = _base()
    data["astarte_device_sdk"] = "not a table"
    with pytest.raises(ConfigError):
        DeviceManagerOptions.from_dict(data)

    data = _base()
    data["telemetry_config"] = {"a": 1}
    with pytest.raises(ConfigError):
        DeviceManagerOptions.from_dict(data)

    data = _base()
    data["store_directory"] = 5
    with pytest.raises(ConfigError):
        DeviceManagerOptions.from_dict(data)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        DeviceManagerOptions.from_dict([])