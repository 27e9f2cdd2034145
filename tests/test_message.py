"""Message building: sender resolution, recipient lists, and rendered headers."""

from __future__ import annotations

import quopri

import pytest

from smtp_dispatch.adapters.email.message import MAX_LINE_LENGTH, MessageSpec, build_message, split_headers
from smtp_dispatch.adapters.memory import InMemorySettingsSource
from smtp_dispatch.domain.errors import (
    InvalidAddressError,
    InvalidHeaderError,
    MessageError,
    MissingFromError,
    MissingRecipientsError,
    SmtpDispatchError,
)

NO_DEFAULTS = InMemorySettingsSource()


def _headers(spec: MessageSpec) -> dict[str, str]:
    return split_headers(spec.as_bytes())


# ======================== Sender ========================


@pytest.mark.os_agnostic
def test_explicit_sender_wins_over_configured_default(relay_settings: InMemorySettingsSource) -> None:
    """from_address beats the configured default."""
    spec = build_message(subject="s", body="b", to="to@example.com", settings=relay_settings, from_address="me@example.com")

    assert spec.sender.value == "me@example.com"
    assert _headers(spec)["From"] == "me@example.com"


@pytest.mark.os_agnostic
def test_configured_sender_is_used_when_not_passed(relay_settings: InMemorySettingsSource) -> None:
    """Without from_address the configured default is the sender."""
    spec = build_message(subject="s", body="b", to="to@example.com", settings=relay_settings)

    assert spec.sender.value == "noreply@example.com"


@pytest.mark.os_agnostic
@pytest.mark.parametrize("from_address", [None, "", "  "])
def test_missing_sender_everywhere_raises(from_address: str | None) -> None:
    """No sender anywhere is reported with its own message."""
    with pytest.raises(MissingFromError, match="From address not provided and no default configured"):
        build_message(subject="s", body="b", to="to@example.com", settings=NO_DEFAULTS, from_address=from_address)


@pytest.mark.os_agnostic
def test_malformed_sender_names_the_from_field() -> None:
    """A bad From address is an InvalidAddressError for 'from'."""
    with pytest.raises(InvalidAddressError) as exc_info:
        build_message(subject="s", body="b", to="to@example.com", settings=NO_DEFAULTS, from_address="nope")

    assert exc_info.value.field == "from"


# ======================== Recipients ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize("to", [None, "", "   "])
def test_blank_to_raises_missing_recipients(relay_settings: InMemorySettingsSource, to: str | None) -> None:
    """At least one 'to' address is required."""
    with pytest.raises(MissingRecipientsError):
        build_message(subject="s", body="b", to=to, settings=relay_settings)


@pytest.mark.os_agnostic
def test_message_spec_refuses_empty_to_list(relay_settings: InMemorySettingsSource) -> None:
    """The invariant holds for direct construction too."""
    sender = build_message(subject="s", body="b", to="x@example.com", settings=relay_settings).sender

    with pytest.raises(MissingRecipientsError):
        MessageSpec(subject="s", body="b", is_html=False, sender=sender, to=())


@pytest.mark.os_agnostic
def test_envelope_lists_to_then_cc_then_bcc(relay_settings: InMemorySettingsSource) -> None:
    """Every recipient gets a RCPT TO, Bcc included."""
    spec = build_message(
        subject="s",
        body="b",
        to="a@example.com",
        cc="c@example.com",
        bcc="h1@example.com, h2@example.com",
        settings=relay_settings,
    )

    assert spec.envelope_recipients == ["a@example.com", "c@example.com", "h1@example.com", "h2@example.com"]


@pytest.mark.os_agnostic
def test_malformed_cc_names_the_cc_field(relay_settings: InMemorySettingsSource) -> None:
    """Errors identify which list held the bad segment."""
    with pytest.raises(InvalidAddressError) as exc_info:
        build_message(subject="s", body="b", to="a@example.com", cc="ok@example.com, broken", settings=relay_settings)

    assert exc_info.value.field == "cc"
    assert exc_info.value.segment == "broken"


@pytest.mark.os_agnostic
def test_none_subject_is_a_type_error(relay_settings: InMemorySettingsSource) -> None:
    """Subject and body are required strings; empty is fine, None is not."""
    with pytest.raises(TypeError):
        build_message(subject=None, body="b", to="a@example.com", settings=relay_settings)  # type: ignore[arg-type]

    spec = build_message(subject="", body="", to="a@example.com", settings=relay_settings)
    assert (spec.subject, spec.body) == ("", "")


# ======================== Headers ========================


@pytest.mark.os_agnostic
def test_multiple_to_without_cc_or_bcc(relay_settings: InMemorySettingsSource) -> None:
    """Two recipients share one To header; no Cc or Bcc header appears."""
    spec = build_message(subject="Hi", body="b", to="a@x.com,b@x.com", settings=relay_settings)

    headers = _headers(spec)

    assert headers["To"] == "a@x.com, b@x.com"
    assert "Cc" not in headers
    assert "Bcc" not in headers


@pytest.mark.os_agnostic
def test_cc_header_appears_when_given(relay_settings: InMemorySettingsSource) -> None:
    """Non-empty Cc is rendered in input order."""
    spec = build_message(subject="s", body="b", to="a@x.com", cc="c2@x.com, c1@x.com", settings=relay_settings)

    assert _headers(spec)["Cc"] == "c2@x.com, c1@x.com"


@pytest.mark.os_agnostic
def test_bcc_header_hidden_by_default(relay_settings: InMemorySettingsSource) -> None:
    """Bcc addresses stay envelope-only unless asked otherwise."""
    spec = build_message(subject="s", body="b", to="a@x.com", bcc="h@x.com", settings=relay_settings)

    assert "Bcc" not in _headers(spec)
    assert b"h@x.com" not in spec.as_bytes()


@pytest.mark.os_agnostic
def test_bcc_header_kept_when_requested(relay_settings: InMemorySettingsSource) -> None:
    """keep_bcc_header renders the list joined by ', ' in input order."""
    spec = build_message(
        subject="s",
        body="b",
        to="a@x.com",
        bcc="h2@x.com,h1@x.com",
        keep_bcc_header=True,
        settings=relay_settings,
    )

    assert _headers(spec)["Bcc"] == "h2@x.com, h1@x.com"


@pytest.mark.os_agnostic
def test_html_body_declares_html_content_type(relay_settings: InMemorySettingsSource) -> None:
    """HTML bodies carry Content-Type: text/html."""
    spec = build_message(subject="s", body="<p>Hi</p>", to="a@x.com", is_html=True, settings=relay_settings)

    content_type = _headers(spec)["Content-Type"]

    assert content_type.startswith("text/html")


@pytest.mark.os_agnostic
def test_plain_body_has_no_content_type(relay_settings: InMemorySettingsSource) -> None:
    """Plain bodies do not declare a Content-Type."""
    spec = build_message(subject="s", body="Hello there", to="a@x.com", settings=relay_settings)

    rendered = spec.as_bytes()

    assert "Content-Type" not in split_headers(rendered)
    assert rendered.rstrip().endswith(b"Hello there")


@pytest.mark.os_agnostic
def test_non_ascii_plain_body_is_quoted_printable(relay_settings: InMemorySettingsSource) -> None:
    """Non-ASCII text survives as QP-encoded UTF-8 without a Content-Type."""
    spec = build_message(subject="s", body="Grüße", to="a@x.com", settings=relay_settings)

    headers = _headers(spec)

    assert headers["Content-Transfer-Encoding"] == "quoted-printable"
    assert "Content-Type" not in headers
    assert b"Gr=C3=BC=C3=9Fe" in spec.as_bytes()


@pytest.mark.os_agnostic
def test_subject_and_standard_headers_are_present(relay_settings: InMemorySettingsSource) -> None:
    """Subject is verbatim; Date, Message-ID and MIME-Version are generated."""
    spec = build_message(subject="Quarterly report", body="b", to="a@x.com", settings=relay_settings)

    headers = _headers(spec)

    assert headers["Subject"] == "Quarterly report"
    assert headers["MIME-Version"] == "1.0"
    assert headers["Message-ID"].endswith("@example.com>")
    assert "Date" in headers


@pytest.mark.os_agnostic
def test_rendered_message_uses_crlf_line_endings(relay_settings: InMemorySettingsSource) -> None:
    """The DATA payload is SMTP-ready."""
    spec = build_message(subject="s", body="line one\nline two", to="a@x.com", settings=relay_settings)

    rendered = spec.as_bytes()

    assert b"line one\r\nline two" in rendered


# ======================== Line length and header safety ========================


@pytest.mark.os_agnostic
def test_overlong_ascii_line_is_quoted_printable(relay_settings: InMemorySettingsSource) -> None:
    """A 2000-character line is folded by QP so no wire line exceeds 998 characters."""
    body = "x" * 2000

    spec = build_message(subject="s", body=body, to="a@x.com", settings=relay_settings)
    rendered = spec.as_bytes()
    _, _, payload = rendered.partition(b"\r\n\r\n")

    assert _headers(spec)["Content-Transfer-Encoding"] == "quoted-printable"
    assert max(len(line) for line in rendered.split(b"\r\n")) <= MAX_LINE_LENGTH
    assert quopri.decodestring(payload).rstrip() == body.encode("ascii")


@pytest.mark.os_agnostic
def test_ascii_line_at_the_limit_stays_unencoded(relay_settings: InMemorySettingsSource) -> None:
    """Exactly 998 characters is still a legal raw line."""
    body = "y" * MAX_LINE_LENGTH

    spec = build_message(subject="s", body=body, to="a@x.com", settings=relay_settings)

    assert "Content-Transfer-Encoding" not in _headers(spec)
    assert body.encode("ascii") in spec.as_bytes()


@pytest.mark.os_agnostic
@pytest.mark.parametrize("subject", ["Hi\r\nBcc: victim@example.com", "Hi\nX-Injected: 1", "Hi\rthere"])
def test_line_breaks_in_subject_are_rejected_at_build_time(
    relay_settings: InMemorySettingsSource, subject: str
) -> None:
    """Header injection fails while building, as a domain error."""
    with pytest.raises(InvalidHeaderError) as exc_info:
        build_message(subject=subject, body="b", to="a@x.com", settings=relay_settings)

    assert exc_info.value.field == "subject"
    assert exc_info.value.kind == "InvalidHeader"
    assert isinstance(exc_info.value, MessageError)
    assert isinstance(exc_info.value, SmtpDispatchError)


@pytest.mark.os_agnostic
def test_message_spec_renders_once_at_construction(relay_settings: InMemorySettingsSource) -> None:
    """The DATA payload is fixed when the MessageSpec is built, including Date and Message-ID."""
    spec = build_message(subject="s", body="b", to="a@x.com", settings=relay_settings)

    assert spec.as_bytes() is spec.as_bytes()
    assert spec.rendered == spec.as_bytes()


# ======================== Internationalized addresses ========================


@pytest.mark.os_agnostic
def test_ascii_addresses_do_not_need_smtputf8(relay_settings: InMemorySettingsSource) -> None:
    spec = build_message(subject="Grüße", body="b", to="a@x.com", settings=relay_settings)

    assert spec.needs_smtputf8 is False


@pytest.mark.os_agnostic
def test_non_ascii_recipient_needs_smtputf8(relay_settings: InMemorySettingsSource) -> None:
    """A UTF-8 mailbox is written raw into the To header and flags the envelope."""
    spec = build_message(subject="s", body="b", to="jörg@example.com", settings=relay_settings)

    assert spec.needs_smtputf8 is True
    assert "jörg@example.com".encode() in spec.as_bytes()
