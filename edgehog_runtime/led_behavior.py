"""LED behaviour requests: event decoding and blink sequences."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

_log = logging.getLogger(__name__)

LED_BEHAVIOR_INTERFACE = "io.edgehog.devicemanager.LedBehavior"

SetLed = Callable[[str, bool], Awaitable[bool]]


class FromEventError(Exception):
    """Raised when a device event cannot be decoded into an LED request."""


class TypeConversionError(Exception):
    """Raised when a value cannot be converted to the expected type."""


@dataclass(frozen=True)
class DeviceEvent:
    """An event received from the cloud on a given interface and path."""

    interface: str
    path: str
    data: Any


class Blink(Enum):
    """The blink patterns an LED can be asked to perform."""

    SINGLE = "Blink60Seconds"
    DOUBLE = "DoubleBlink60Seconds"
    SLOW = "SlowBlink60Seconds"

    @classmethod
    def from_value(cls, value: Any) -> Blink:
        """Convert the wire string to a blink pattern."""
        if not isinstance(value, str):
            raise TypeConversionError(f"expected a string, got {type(value).__name__}")
        try:
            return cls(value)
        except ValueError:
            _log.error("unrecognize LedBehavior behavior value %s", value)
            raise TypeConversionError(f"unknown LED behavior {value!r}") from None


def led_id_from_path(path: str) -> str | None:
    """Return the LED id from a path of the form '/<led_id>/...', or None."""
    if not path.startswith("/"):
        return None
    led_id, sep, _ = path[1:].partition("/")
    return led_id if sep else None


@dataclass(frozen=True)
class LedEvent:
    """A request to make a given LED blink with a given pattern."""

    led_id: str
    behavior: Blink

    @classmethod
    def from_event(cls, event: DeviceEvent) -> LedEvent:
        """Decode an event received on the LED behaviour interface."""
        led_id = led_id_from_path(event.path)
        if led_id is None:
            raise FromEventError(
                f"invalid path {event.path!r} for interface {LED_BEHAVIOR_INTERFACE}"
            )
        if event.interface != LED_BEHAVIOR_INTERFACE:
            raise FromEventError(
                f"unexpected interface {event.interface!r}, "
                f"expected {LED_BEHAVIOR_INTERFACE}"
            )
        if event.path != f"/{led_id}/behavior":
            raise FromEventError(
                f"unknown endpoint {event.path!r} for interface {LED_BEHAVIOR_INTERFACE}"
            )
        if isinstance(event.data, Mapping):
            raise FromEventError(
                f"expected individual data on {LED_BEHAVIOR_INTERFACE}, got an object"
            )
        try:
            behavior = Blink.from_value(event.data)
        except TypeConversionError as err:
            raise FromEventError(f"couldn't convert LED behavior: {err}") from err
        return cls(led_id=led_id, behavior=behavior)


@dataclass(frozen=True)
class BlinkConf:
    """Timing of a blink sequence."""

    repetitions: int
    end_time_secs: int
    after_on_delay_millis: int
    after_off_delay_millis: int
    end_cycle_delay_millis: int

    @classmethod
    def from_blink(cls, blink: Blink) -> BlinkConf:
        """Return the timing for a blink pattern."""
        if blink is Blink.SINGLE:
            return cls(
                repetitions=1,
                end_time_secs=60,
                after_on_delay_millis=1000,
                after_off_delay_millis=1000,
                end_cycle_delay_millis=0,
            )
        if blink is Blink.DOUBLE:
            return cls(
                repetitions=2,
                end_time_secs=60,
                after_on_delay_millis=300,
                after_off_delay_millis=200,
                end_cycle_delay_millis=800,
            )
        return cls(
            repetitions=1,
            end_time_secs=60,
            after_on_delay_millis=2000,
            after_off_delay_millis=2000,
            end_cycle_delay_millis=0,
        )

    async def blink(self, led_id: str, set_led: SetLed) -> None:
        """Run the blink sequence, stopping early if the LED manager refuses a change."""
        loop = asyncio.get_running_loop()
        start = loop.time()
        while loop.time() - start < self.end_time_secs:
            for _ in range(self.repetitions):
                _log.debug("Turning led on")
                if not await set_led(led_id, True):
                    return
                await asyncio.sleep(self.after_on_delay_millis / 1000)
                _log.debug("Turning led off")
                if not await set_led(led_id, False):
                    return
                await asyncio.sleep(self.after_off_delay_millis / 1000)
            await asyncio.sleep(self.end_cycle_delay_millis / 1000)


@dataclass
class LedBlink:
    """Actor handling LED events by driving the LED manager."""

    set_led: SetLed

    task: ClassVar[str] = "led-behavior"

    async def init(self) -> None:
        """Check that the LED manager callback is usable before handling events."""
        if not callable(self.set_led):
            raise TypeError(
                f"{self.task}: LED setter must be callable, "
                f"got {type(self.set_led).__name__}"
            )
        _log.debug("%s actor ready", self.task)

    async def handle(self, msg: LedEvent) -> None:
        """Blink the requested LED with the requested pattern."""
        await BlinkConf.from_blink(msg.behavior).blink(msg.led_id, self.set_led)