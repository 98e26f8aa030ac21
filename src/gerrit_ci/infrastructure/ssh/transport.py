"""Paramiko-backed SSH transport to the Gerrit command interface."""

from __future__ import annotations

import logging
import time

from dataclasses import dataclass, field
from pathlib import Path

import paramiko

from gerrit_ci.domain.change.value_objects import CommandResult
from gerrit_ci.shared.constants import (
    DEFAULT_COMMAND_TIMEOUT_SECONDS,
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_SSH_PORT,
)
from gerrit_ci.shared.exceptions import GerritConnectionError, TransportIOError

logger = logging.getLogger(__name__)

_READ_CHUNK = 32_768
_POLL_SECONDS = 0.05


@dataclass(frozen=True)
class SshSettings:
    """Everything needed to open a session; built once per service."""

    hostname: str
    username: str
    port: int = DEFAULT_SSH_PORT
    private_key_file: Path | None = None
    passphrase: str | None = field(default=None, repr=False)
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT_SECONDS
    strict_host_key_checking: bool = False

    @property
    def address(self) -> str:
        return f"{self.username}@{self.hostname}:{self.port}"


# =============================================================================
# TRANSPORT
# =============================================================================


@dataclass
class ParamikoTransport:
    """Implements GerritTransport on top of ``paramiko.SSHClient``.

    One instance holds at most one open session; it is not safe to share
    across threads.
    """

    settings: SshSettings
    _client: paramiko.SSHClient | None = field(default=None, init=False, repr=False)

    @property
    def is_connected(self) -> bool:
        if self._client is None:
            return False
        transport = self._client.get_transport()
        return transport is not None and transport.is_active()

    def connect(self) -> None:
        """Open the SSH session if needed.

        Raises:
            GerritConnectionError: If authentication or the handshake fails.
        """
        if self.is_connected:
            return
        self.disconnect()

        client = paramiko.SSHClient()
        client.load_system_host_keys()
        if self.settings.strict_host_key_checking:
            client.set_missing_host_key_policy(paramiko.RejectPolicy())
        else:
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        key_file = self.settings.private_key_file
        logger.debug("Connecting to %s", self.settings.address)
        try:
            client.connect(
                hostname=self.settings.hostname,
                port=self.settings.port,
                username=self.settings.username,
                key_filename=str(key_file) if key_file is not None else None,
                passphrase=self.settings.passphrase,
                timeout=self.settings.connect_timeout,
                allow_agent=key_file is None,
                look_for_keys=key_file is None,
            )
        except paramiko.AuthenticationException as e:
            client.close()
            msg = f"SSH authentication failed for {self.settings.address}"
            raise GerritConnectionError(msg, cause=e) from e
        except (paramiko.SSHException, OSError) as e:
            client.close()
            msg = f"SSH connection error to {self.settings.address}: {e}"
            raise GerritConnectionError(msg, cause=e) from e

        self._client = client

    def execute(self, command: str) -> CommandResult:
        """Run *command* on the server and collect its output.

        Raises:
            GerritConnectionError: If not connected or the session drops.
            TransportIOError: On socket-level faults such as timeouts.
        """
        if self._client is None or not self.is_connected:
            msg = f"Not connected to {self.settings.address}"
            raise GerritConnectionError(msg)

        try:
            _stdin, stdout, _stderr = self._client.exec_command(
                command, timeout=self.settings.command_timeout
            )
            out, err, exit_status = _drain(
                stdout.channel, self.settings.command_timeout
            )
        except paramiko.SSHException as e:
            self.disconnect()
            msg = f"SSH connection error: {e}"
            raise GerritConnectionError(msg, cause=e) from e
        except OSError as e:
            msg = f"SSH I/O error: {e}"
            raise TransportIOError(msg, cause=e) from e

        return CommandResult(
            exit_status=exit_status,
            stdout=out.decode("utf-8", errors="replace"),
            stderr=err.decode("utf-8", errors="replace"),
        )

    def disconnect(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


def _drain(channel: paramiko.Channel, idle_timeout: float) -> tuple[bytes, bytes, int]:
    """Read stdout and stderr together until the command exits.

    Both streams share the channel window, so neither may be read to the
    end before the other.

    Raises:
        TimeoutError: If no output arrives for *idle_timeout* seconds.
    """
    out = bytearray()
    err = bytearray()
    deadline = time.monotonic() + idle_timeout
    while True:
        progressed = False
        while channel.recv_ready():
            out += channel.recv(_READ_CHUNK)
            progressed = True
        while channel.recv_stderr_ready():
            err += channel.recv_stderr(_READ_CHUNK)
            progressed = True

        if channel.exit_status_ready() and not (
            channel.recv_ready() or channel.recv_stderr_ready()
        ):
            return bytes(out), bytes(err), channel.recv_exit_status()

        if progressed:
            deadline = time.monotonic() + idle_timeout
        elif time.monotonic() >= deadline:
            msg = f"No command output for {idle_timeout}s"
            raise TimeoutError(msg)
        else:
            time.sleep(_POLL_SECONDS)
