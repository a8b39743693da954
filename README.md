# edgehog_runtime

Asyncio building blocks for a device-management runtime. The package has no
third-party dependencies.

## Modules

### `edgehog_runtime.led_behavior`

- `DeviceEvent(interface, path, data)` is an event received from the cloud.
- `LedEvent.from_event(event)` decodes an event on the
  `io.edgehog.devicemanager.LedBehavior` interface with path `/<led_id>/behavior`.
  It raises `FromEventError` when the interface, the path or the value is wrong.
- `Blink` holds the patterns `SINGLE`, `DOUBLE` and `SLOW`. Their wire values are
  `Blink60Seconds`, `DoubleBlink60Seconds` and `SlowBlink60Seconds`.
  `Blink.from_value` raises `TypeConversionError` for any other value.
- `led_id_from_path(path)` returns the first path segment, or `None`.
- `BlinkConf.from_blink(blink)` gives the timing of a pattern.
  `await conf.blink(led_id, set_led)` runs the cycle for 60 seconds. It stops early
  when `set_led(led_id, on)` returns `False`.
- `LedBlink(set_led)` is an actor with the task name `"led-behavior"`.
  `await init()` checks that the setter is callable. `await handle(msg)` blinks
  the LED named in a `LedEvent`.

### `edgehog_runtime.forwarder`

- `SessionInfo(host, port, session_token, secure=False)` describes a remote
  session. Its `url` property builds
  `ws[s]://<host>:<port>/device/websocket?session=<token>`. It raises `ValueError`
  for an empty host or a port that is out of range.
- `SessionStatus` has the values `Connecting`, `Connected` and `Disconnected`.
- `SessionState` has the constructors `connecting`, `connected` and `disconnected`.
  `await state.send(publisher)` publishes the status on
  `io.edgehog.devicemanager.ForwarderSessionState` at `/<token>/status`. A
  disconnected session clears that property instead.
- `Publisher` is the protocol the forwarder publishes through. It has the methods
  `send`, `unset` and `interface_props`.
- `await Forwarder.init(publisher, connect)` clears every stored session state and
  returns a forwarder.
  - `forwarder.handle_sessions(sinfo)` starts one asyncio task per session. It
    skips sessions that already have a running task.
  - The task reports `Connecting` and calls `connect(url, secure)` to get a
    connections manager, then reports `Connected`.
  - When the manager's `handle_connections()` raises `Disconnected`, the task
    reports `Connecting` again, calls `reconnect()`, and reports `Connected`
    once more.
  - When the session ends, the state is cleared.
  - Publishing failures raise `ForwarderError`.

### `edgehog_runtime.options`

- `DeviceManagerOptions.from_dict(data)` builds the runtime options from a mapping,
  for example a parsed TOML document. It raises `ConfigError` for a missing or
  malformed field.
- `AstarteLibrary.parse(name)` accepts `astarte-device-sdk` or
  `astarte-message-hub`.

## Example

```python
from edgehog_runtime.forwarder import SessionInfo
from edgehog_runtime.led_behavior import DeviceEvent, LedEvent

event = DeviceEvent(
    interface="io.edgehog.devicemanager.LedBehavior",
    path="/42/behavior",
    data="Blink60Seconds",
)
led_event = LedEvent.from_event(event)
print(led_event.led_id, led_event.behavior)  # 42 Blink.SINGLE

session = SessionInfo(host="127.0.0.1", port=8080, session_token="token")
print(session.url)  # ws://127.0.0.1:8080/device/websocket?session=token
```

## What the package does not do

- It has no command-line program.
- It does not read configuration files from disk. It only reads a mapping you
  have already parsed.
- It has no cloud client. The caller supplies the `Publisher`.
- It has no WebSocket connections manager. The caller supplies the `connect`
  callable that returns one.
- It has no LED manager bus client. The caller supplies the `set_led` coroutine
  function.
- The `astarte_device_sdk`, `astarte_message_hub` and `telemetry_config` options
  are stored as given and are not interpreted.

## Installing

```
pip install .
```

## Running the tests

```
pip install .[test]
pytest
```