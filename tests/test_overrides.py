"""Unit tests for CLI configuration overrides (--set SECTION.KEY=VALUE)."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from lib_layered_config import Config

from smtp_dispatch.adapters.config.overrides import (
    ConfigOverride,
    apply_overrides,
    coerce_value,
    parse_override,
)
from smtp_dispatch.adapters.config.sources import LayeredSettingsSource

# ======================== parse_override ========================


@pytest.mark.os_agnostic
def test_parse_override_simple_key() -> None:
    """SECTION.KEY=VALUE splits into its three parts."""
    assert parse_override("smtp.server=smtp.example.com") == ConfigOverride(
        section="smtp", key="server", value="smtp.example.com"
    )


@pytest.mark.os_agnostic
def test_parse_override_value_containing_equals() -> None:
    """Only the first '=' separates key from value."""
    assert parse_override("smtp.password=a=b").value == "a=b"


@pytest.mark.os_agnostic
def test_parse_override_empty_value() -> None:
    """An empty value is kept as an empty string."""
    assert parse_override("smtp.username=").value == ""


@pytest.mark.os_agnostic
@pytest.mark.parametrize("raw", ["smtp.server", "server=x", ".server=x", "smtp.=x", "=x"])
def test_parse_override_rejects_malformed_input(raw: str) -> None:
    """Missing '=', missing section dot, or empty parts are rejected."""
    with pytest.raises(ValueError, match="expected SECTION.KEY=VALUE"):
        parse_override(raw)


# ======================== coerce_value ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2525", 2525),
        ("2.5", 2.5),
        ("true", True),
        ("false", False),
        ("null", None),
        ('["a","b"]', ["a", "b"]),
        ("smtp.example.com", "smtp.example.com"),
        ("", ""),
    ],
)
def test_coerce_value_reads_json_scalars(raw: str, expected: object) -> None:
    """JSON literals become typed values; anything else stays text."""
    assert coerce_value(raw) == expected


# ======================== apply_overrides ========================


@pytest.mark.os_agnostic
def test_apply_overrides_without_overrides_returns_same_config() -> None:
    """No overrides, no copy."""
    config = Config({"smtp": {"port": 587}}, {})

    assert apply_overrides(config, ()) is config


@pytest.mark.os_agnostic
def test_apply_overrides_merges_into_existing_section() -> None:
    """Overrides replace single keys and keep their siblings."""
    config = Config({"smtp": {"server": "smtp.example.com", "port": 587}}, {})

    result = apply_overrides(config, ("smtp.port=2525", "smtp.tls=false"))
    source = LayeredSettingsSource(result)

    assert source.get("server") == "smtp.example.com"
    assert source.get("port") == 2525
    assert source.get("tls") is False


@pytest.mark.os_agnostic
def test_apply_overrides_creates_missing_section() -> None:
    """A section absent from every layer can be created on the command line."""
    result = apply_overrides(Config({}, {}), ("smtp.server=cli.example.com",))

    assert LayeredSettingsSource(result).get("server") == "cli.example.com"


@pytest.mark.os_agnostic
def test_later_override_of_same_key_wins() -> None:
    """Repeating a key keeps the last value."""
    result = apply_overrides(Config({}, {}), ("smtp.port=25", "smtp.port=2525"))

    assert LayeredSettingsSource(result).get("port") == 2525


@pytest.mark.os_agnostic
@given(port=st.integers(min_value=1, max_value=65535))
@settings(max_examples=50)
def test_integer_overrides_arrive_as_integers(port: int) -> None:
    """Numeric text is coerced before it reaches the registry."""
    result = apply_overrides(Config({}, {}), (f"smtp.port={port}",))

    assert LayeredSettingsSource(result).get("port") == port
