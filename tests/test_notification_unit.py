from datetime import datetime, timezone

from quote_api.models.quote_request import QuoteRequest
from quote_api.services.notification_service import format_received_at, render_quote_email

ORDERED_VALUES = ["Jane Doe", "Acme CC", "jane@acme.co.za", "0821234567", "Plumbing", "Need a quote"]
RECEIVED_AT = datetime(2025, 1, 15, 10, 0, 0, tzinfo=timezone.utc)


def _quote(**overrides) -> QuoteRequest:
    values = {
        "name": "Jane Doe",
        "company": "Acme CC",
        "email": "jane@acme.co.za",
        "phone": "0821234567",
        "service": "Plumbing",
        "message": "Need a quote",
    }
    values.update(overrides)
    return QuoteRequest(**values)


def _assert_once_in_order(body: str, values) -> None:
    positions = []
    for value in values:
        assert body.count(value) == 1, value
        positions.append(body.index(value))
    assert positions == sorted(positions)


def test_every_field_appears_once_in_fixed_order() -> None:
    email = render_quote_email(_quote(), RECEIVED_AT)
    _assert_once_in_order(email.html, ORDERED_VALUES)
    _assert_once_in_order(email.text, ORDERED_VALUES)


def test_subject_names_service_and_company() -> None:
    email = render_quote_email(_quote(), RECEIVED_AT)
    assert email.subject == "Quote Request: Plumbing – Acme CC"


def test_absent_message_is_omitted() -> None:
    email = render_quote_email(_quote(message=None), RECEIVED_AT)
    assert "Message:" not in email.html
    assert "Message:" not in email.text
    _assert_once_in_order(email.html, ORDERED_VALUES[:-1])


def test_message_newlines_become_line_breaks() -> None:
    email = render_quote_email(_quote(message="Line one\nLine two\r\nLine three"), RECEIVED_AT)
    assert "Line one<br/>Line two<br/>Line three" in email.html
    assert "Line one\nLine two\nLine three" in email.text


def test_user_values_are_html_escaped() -> None:
    email = render_quote_email(_quote(name="<b>Jane</b>", message="a & b"), RECEIVED_AT)
    assert "&lt;b&gt;Jane&lt;/b&gt;" in email.html
    assert "<b>Jane</b>" not in email.html
    assert "a &amp; b" in email.html


def test_received_at_uses_south_african_time() -> None:
    assert format_received_at(RECEIVED_AT) == "2025/01/15, 12:00:00"
    email = render_quote_email(_quote(), RECEIVED_AT)
    assert "Received at 2025/01/15, 12:00:00" in email.html
    assert "Received at 2025/01/15, 12:00:00" in email.text


def test_naive_timestamps_are_treated_as_utc() -> None:
    assert format_received_at(datetime(2025, 6, 30, 23, 30, 0)) == "2025/07/01, 01:30:00"


def test_attribution_is_listed_after_the_message() -> None:
    email = render_quote_email(_quote(utm_source="google", referral="friend"), RECEIVED_AT)
    assert "UTM source: google" in email.html
    assert "Referral: friend" in email.html
    assert "UTM medium" not in email.html
    assert email.html.index("Need a quote") < email.html.index("UTM source")
    assert "UTM source: google" in email.text
