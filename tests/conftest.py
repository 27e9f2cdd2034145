"""Shared pytest fixtures for the send pipeline, the CLI and the local SMTP listener.

Centralizes test infrastructure:
- Settings sources and Config objects built from plain dicts
- Services factories that swap only the I/O boundaries (config loading, SMTP)
- A real SMTP listener (aiosmtpd) on a free localhost port for end-to-end runs
"""

from __future__ import annotations

import re
import socket
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

import lib_cli_exit_tools
import pytest
from aiosmtpd.controller import Controller
from click.testing import CliRunner
from lib_layered_config import Config

from smtp_dispatch.adapters.memory import InMemoryConfigLoader, InMemorySettingsSource, TransportSpy

if TYPE_CHECKING:
    from smtp_dispatch.composition import AppServices


def _load_dotenv() -> None:
    """Load .env file when it exists for integration test configuration."""
    from dotenv import load_dotenv

    env_file = Path(__file__).parent.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)


_load_dotenv()

ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(item.name for item in fields(type(lib_cli_exit_tools.config)))


def _remove_ansi_codes(text: str) -> str:
    """Return *text* stripped of ANSI escape sequences."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


def _snapshot_cli_config() -> dict[str, object]:
    """Capture every attribute from ``lib_cli_exit_tools.config``."""
    return {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}


def _restore_cli_config(snapshot: dict[str, object]) -> None:
    """Reapply a configuration snapshot captured by ``_snapshot_cli_config``."""
    for name, value in snapshot.items():
        setattr(lib_cli_exit_tools.config, name, value)


# ======================== CLI plumbing ========================


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test.

    Use ``result.stdout`` for clean output so log lines on stderr never
    contaminate assertions on the printed reply code.
    """
    return CliRunner()


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string."""

    def _strip(value: str) -> str:
        return _remove_ansi_codes(value)

    return _strip


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset traceback flags to a known baseline and restore after the test."""
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = _snapshot_cli_config()
    try:
        yield
    finally:
        _restore_cli_config(snapshot)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Drop cached layered config before the test and after it."""
    from smtp_dispatch.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield
    config_mod.get_config.cache_clear()


# ======================== Settings and Config ========================


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Create real Config instances from test data dicts without filesystem I/O."""

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


@pytest.fixture
def settings_factory() -> Callable[..., InMemorySettingsSource]:
    """Create an InMemorySettingsSource from keyword arguments.

    Example:
        def test_port(settings_factory) -> None:
            source = settings_factory(server="smtp.example.com", port="2525")
    """

    def _factory(**values: Any) -> InMemorySettingsSource:
        return InMemorySettingsSource(values)

    return _factory


@pytest.fixture
def relay_settings() -> InMemorySettingsSource:
    """A fully configured defaults source: plain relay with a default sender."""
    return InMemorySettingsSource(
        {
            "server": "smtp.example.com",
            "port": "2525",
            "tls": "false",
            "from_address": "noreply@example.com",
        }
    )


@pytest.fixture
def transport_spy() -> TransportSpy:
    """A fresh recording transport per test."""
    return TransportSpy()


# ======================== Services injection ========================


@pytest.fixture
def production_factory() -> Callable[[], AppServices]:
    """Provide the production services factory for commands that need no injection."""
    from smtp_dispatch.composition import build_production

    return build_production


@dataclass
class SendCliContext:
    """Services factory plus the spy that records what ``send`` submitted."""

    factory: Callable[[], Any]
    spy: TransportSpy
    captured_backends: list[Any] = field(default_factory=list)


@pytest.fixture
def send_cli_context() -> Callable[[dict[str, Any]], SendCliContext]:
    """Create CLI test context with injected config and a recording transport.

    The real resolver, message builder and settings sources run; only the
    config loader and the SMTP session are replaced.

    Example:
        def test_send(cli_runner, send_cli_context) -> None:
            ctx = send_cli_context({"smtp": {"server": "smtp.test.com", "from_address": "a@test.com"}})
            result = cli_runner.invoke(cli, ["send", "--to", "b@test.com", "--subject", "Hi"], obj=ctx.factory)
            assert ctx.spy.sent_messages
    """
    from smtp_dispatch.composition import AppServices, build_production

    def _create(config_data: dict[str, Any]) -> SendCliContext:
        spy = TransportSpy()
        prod = build_production()
        context = SendCliContext(factory=lambda: test_services, spy=spy)

        def _recording_settings_source(cfg: Config, backend: Any) -> Any:
            context.captured_backends.append(backend)
            return prod.get_settings_source(cfg, backend)

        test_services = AppServices(
            get_config=InMemoryConfigLoader(config_data),
            get_settings_source=_recording_settings_source,
            display_config=prod.display_config,
            send_email=prod.send_email,
            create_transport=spy.create_transport,
            init_logging=prod.init_logging,
        )
        return context

    return _create


@pytest.fixture
def config_cli_context() -> Callable[[dict[str, Any]], Callable[[], AppServices]]:
    """Create a services factory whose ``get_config`` returns the given data."""
    from smtp_dispatch.composition import AppServices, build_production

    def _create(config_data: dict[str, Any]) -> Callable[[], AppServices]:
        prod = build_production()
        test_services = AppServices(
            get_config=InMemoryConfigLoader(config_data),
            get_settings_source=prod.get_settings_source,
            display_config=prod.display_config,
            send_email=prod.send_email,
            create_transport=prod.create_transport,
            init_logging=prod.init_logging,
        )
        return lambda: test_services

    return _create


# ======================== Local SMTP listener ========================


def get_free_port() -> int:
    """Find a free port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        s.listen(1)
        port = s.getsockname()[1]
    return port


class CapturingHandler:
    """aiosmtpd handler that records every accepted message."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []
        self.reject_code: int | None = None
        self.reject_message = "Mailbox unavailable"

    async def handle_DATA(self, server: Any, session: Any, envelope: Any) -> str:
        if self.reject_code is not None:
            return f"{self.reject_code} {self.reject_message}"
        self.messages.append(
            {
                "from": envelope.mail_from,
                "to": list(envelope.rcpt_tos),
                "data": envelope.content.decode("utf-8", errors="replace"),
            }
        )
        return "250 Message accepted for delivery"


@dataclass
class SmtpListener:
    """Handle on a running local SMTP listener."""

    host: str
    port: int
    handler: CapturingHandler


@pytest.fixture
def smtp_listener() -> Iterator[SmtpListener]:
    """Start an aiosmtpd listener on a free localhost port (plain SMTP, no TLS)."""
    handler = CapturingHandler()
    port = get_free_port()
    controller = Controller(handler, hostname="127.0.0.1", port=port)
    controller.start()
    try:
        yield SmtpListener(host="127.0.0.1", port=port, handler=handler)
    finally:
        controller.stop()


@pytest.fixture
def free_port() -> int:
    """A localhost port with nothing listening on it."""
    return get_free_port()
