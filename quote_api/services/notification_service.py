from datetime import datetime, timedelta, timezone
from html import escape
from typing import List, Optional

from quote_api.models.email import QuoteEmail
from quote_api.models.quote_request import QuoteRequest

# South Africa Standard Time has no daylight saving
SAST = timezone(timedelta(hours=2), "SAST")
TIMESTAMP_FORMAT = "%Y/%m/%d, %H:%M:%S"

ATTRIBUTION_LABELS = {
    "utm_source": "UTM source",
    "utm_medium": "UTM medium",
    "utm_campaign": "UTM campaign",
    "page": "Page",
    "referral": "Referral",
}


def format_received_at(moment: Optional[datetime] = None) -> str:
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(SAST).strftime(TIMESTAMP_FORMAT)


def build_subject(quote: QuoteRequest) -> str:
    return f"Quote Request: {quote.service} – {quote.company}"


def _labelled_fields(quote: QuoteRequest) -> List[tuple]:
    return [
        ("Name", quote.name),
        ("Company", quote.company),
        ("Email", quote.email),
        ("Phone", quote.phone),
        ("Service", quote.service),
    ]


def render_html(quote: QuoteRequest, received_at: str) -> str:
    parts = ["<h2>New Quote Request</h2>"]
    for label, value in _labelled_fields(quote):
        parts.append(f"<p><strong>{label}:</strong> {escape(value)}</p>")

    if quote.message:
        message = escape(quote.message).replace("\r\n", "\n").replace("\n", "<br/>")
        parts.append(f"<p><strong>Message:</strong><br/>{message}</p>")

    parts.append("<hr/>")
    attribution = quote.attribution()
    if attribution:
        rows = "".join(
            f"<li>{ATTRIBUTION_LABELS[field]}: {escape(value)}</li>" for field, value in attribution.items()
        )
        parts.append(f"<p><small>Source</small></p><ul>{rows}</ul>")
    parts.append(f"<p><small>Received at {received_at}</small></p>")
    return "\n".join(parts)


def render_text(quote: QuoteRequest, received_at: str) -> str:
    lines = ["New Quote Request", ""]
    lines.extend(f"{label}: {value}" for label, value in _labelled_fields(quote))

    if quote.message:
        lines.extend(["", "Message:", quote.message.replace("\r\n", "\n")])

    lines.extend(["", "---"])
    for field, value in quote.attribution().items():
        lines.append(f"{ATTRIBUTION_LABELS[field]}: {value}")
    lines.append(f"Received at {received_at}")
    return "\n".join(lines)


def render_quote_email(quote: QuoteRequest, received_at: Optional[datetime] = None) -> QuoteEmail:
    """Render the internal notification for one quote request."""
    timestamp = format_received_at(received_at)
    return QuoteEmail(
        subject=build_subject(quote),
        html=render_html(quote, timestamp),
        text=render_text(quote, timestamp),
    )
