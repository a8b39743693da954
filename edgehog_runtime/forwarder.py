"""Remote forwarder sessions and their state published to the cloud."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol
from urllib.parse import urlencode, urlsplit

_log = logging.getLogger(__name__)

FORWARDER_SESSION_STATE_INTERFACE = "io.edgehog.devicemanager.ForwarderSessionState"


class ForwarderError(Exception):
    """Raised when the forwarder cannot publish state or manage connections."""


class Disconnected(Exception):
    """Raised by a connections manager when the WebSocket connection is lost."""


@dataclass(frozen=True)
class StoredProp:
    """A property stored for an interface."""

    interface: str
    path: str
    value: Any


class Publisher(Protocol):
    """Something able to publish and clear properties on the cloud side."""

    async def send(self, interface: str, path: str, value: Any) -> None:
        """Publish a property value."""
        ...

    async def unset(self, interface: str, path: str) -> None:
        """Clear a property."""
        ...

    async def interface_props(self, interface: str) -> Iterable[StoredProp]:
        """Return the stored properties of an interface."""
        ...


class ConnectionsManager(Protocol):
    """A live connection to the remote host handling forwarded connections."""

    async def handle_connections(self) -> None:
        """Serve connections until closed; raise Disconnected on connection loss."""
        ...

    async def reconnect(self) -> None:
        """Re-establish a lost connection."""
        ...


Connect = Callable[[str, bool], Awaitable[ConnectionsManager]]


@dataclass(frozen=True)
class SessionInfo:
    """Where and how to open a forwarder session."""

    host: str
    port: int
    session_token: str
    secure: bool = False

    @property
    def url(self) -> str:
        """The WebSocket URL of the session; raises ValueError if it is invalid."""
        if not self.host:
            raise ValueError("empty host")
        if not 0 <= self.port <= 65535:
            raise ValueError(f"invalid port {self.port}")
        scheme = "wss" if self.secure else "ws"
        host = f"[{self.host}]" if ":" in self.host else self.host
        query = urlencode({"session": self.session_token})
        url = f"{scheme}://{host}:{self.port}/device/websocket?{query}"
        parts = urlsplit(url)
        if parts.hostname is None:
            raise ValueError(f"invalid host {self.host!r}")
        _ = parts.port
        return url


class SessionStatus(Enum):
    """The state of a remote session."""

    CONNECTING = "Connecting"
    CONNECTED = "Connected"
    DISCONNECTED = "Disconnected"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SessionState:
    """The state of a remote session with the device."""

    token: str
    status: SessionStatus

    @classmethod
    def connecting(cls, token: str) -> SessionState:
        return cls(token, SessionStatus.CONNECTING)

    @classmethod
    def connected(cls, token: str) -> SessionState:
        return cls(token, SessionStatus.CONNECTED)

    @classmethod
    def disconnected(cls, token: str) -> SessionState:
        return cls(token, SessionStatus.DISCONNECTED)

    async def send(self, publisher: Publisher) -> None:
        """Publish the state; a disconnected session clears its property."""
        path = f"/{self.token}/status"
        if self.status is SessionStatus.DISCONNECTED:
            await publisher.unset(FORWARDER_SESSION_STATE_INTERFACE, path)
        else:
            await publisher.send(FORWARDER_SESSION_STATE_INTERFACE, path, str(self.status))


async def _publish(state: SessionState, publisher: Publisher) -> None:
    try:
        await state.send(publisher)
    except Exception as err:
        raise ForwarderError(f"couldn't publish session state: {err}") from err


@dataclass
class Forwarder:
    """Keeps one running task per remote session."""

    publisher: Publisher
    connect: Connect
    tasks: dict[SessionInfo, asyncio.Task[None]] = field(default_factory=dict)

    @classmethod
    async def init(cls, publisher: Publisher, connect: Connect) -> Forwarder:
        """Clear every stale session state and return a new forwarder."""
        _log.debug("unsetting ForwarderSessionState property")
        try:
            props = await publisher.interface_props(FORWARDER_SESSION_STATE_INTERFACE)
            for prop in props:
                _log.debug("unset %s", prop.path)
                await publisher.unset(FORWARDER_SESSION_STATE_INTERFACE, prop.path)
        except Exception as err:
            raise ForwarderError(f"couldn't clear session states: {err}") from err
        return cls(publisher=publisher, connect=connect)

    def handle_sessions(self, sinfo: SessionInfo) -> None:
        """Start a session task unless one is already running for the same session."""
        try:
            url = sinfo.url
        except ValueError as err:
            _log.error("invalid url, %s", err)
            return

        self.tasks = {key: task for key, task in self.tasks.items() if not task.done()}
        if sinfo in self.tasks:
            return

        _log.info("opening a new session")
        self.tasks[sinfo] = asyncio.create_task(
            self._run_session(url, sinfo.session_token, sinfo.secure)
        )

    async def _run_session(self, url: str, token: str, secure: bool) -> None:
        try:
            await self._handle_session(url, token, secure)
        except ForwarderError as err:
            _log.error("session failed, %s", err)

    async def _handle_session(self, url: str, token: str, secure: bool) -> None:
        await _publish(SessionState.connecting(token), self.publisher)
        try:
            await self._connect(url, token, secure)
        except Exception as err:
            _log.error("failed to connect, %s", err)
        await _publish(SessionState.disconnected(token), self.publisher)
        _log.info("forwarder correctly disconnected")

    async def _connect(self, url: str, token: str, secure: bool) -> None:
        try:
            manager = await self.connect(url, secure)
        except Exception as err:
            raise ForwarderError(f"connections manager error: {err}") from err

        await _publish(SessionState.connected(token), self.publisher)

        while True:
            try:
                await manager.handle_connections()
                return
            except Disconnected as err:
                _log.error("WebSocket disconnected, %s", err)

            await _publish(SessionState.connecting(token), self.publisher)
            try:
                await manager.reconnect()
            except Exception as err:
                raise ForwarderError(f"connections manager error: {err}") from err
            await _publish(SessionState.connected(token), self.publisher)