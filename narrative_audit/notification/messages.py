"""Plain transactional email bodies for report delivery and failures."""

import html

from narrative_audit.notification.base import EmailAttachment, EmailMessage

REPORT_SUBJECT = "Your Narrative Sparring Report is Ready"
ERROR_SUBJECT = "Issue with Your Narrative Sparring Report"
DEFAULT_ERROR_TEXT = "Unknown error occurred"

_FOOTER = "You received this because you purchased a Narrative Sparring diagnostic."


def _wrap_html(body: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en"><head><meta charset="utf-8"></head>\n'
        '<body style="font-family: Helvetica, Arial, sans-serif; line-height: 1.6; '
        'color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">\n'
        f"{body}\n"
        f'<p style="color: #999; font-size: 12px;">{html.escape(_FOOTER)}</p>\n'
        "</body></html>"
    )


def build_report_email(
    *,
    to: str,
    report_url: str,
    name: str | None = None,
    attachment: EmailAttachment | None = None,
) -> EmailMessage:
    greeting = name or "there"
    safe_url = html.escape(report_url)
    body = (
        f"<p>Hi {html.escape(greeting)},</p>\n"
        "<p>Your narrative audit is complete.</p>\n"
        f'<p><a href="{safe_url}">View your report</a></p>\n'
        "<p>It shows where your messaging breaks down, your gap score across "
        "platforms, the core thread that already works and what to fix first.</p>\n"
        "<p>Questions? Reply to this email.</p>"
    )
    text = (
        f"Hi {greeting},\n\n"
        "Your narrative audit is complete.\n\n"
        f"Your report is available at:\n{report_url}\n\n"
        "Questions? Reply to this email.\n\n"
        f"---\n{_FOOTER}"
    )
    return EmailMessage(
        to=to,
        subject=REPORT_SUBJECT,
        html=_wrap_html(body),
        text=text,
        attachments=[attachment] if attachment is not None else [],
    )


def build_error_email(*, to: str, error_message: str, name: str | None = None) -> EmailMessage:
    greeting = name or "there"
    detail = error_message or DEFAULT_ERROR_TEXT
    body = (
        f"<p>Hi {html.escape(greeting)},</p>\n"
        "<p>We ran into an issue generating your narrative report.</p>\n"
        f"<p><strong>Error:</strong> {html.escape(detail)}</p>\n"
        "<p>Our team has been notified and will follow up within 24 hours.</p>"
    )
    text = (
        f"Hi {greeting},\n\n"
        "We ran into an issue generating your narrative report.\n\n"
        f"Error: {detail}\n\n"
        "Our team has been notified and will follow up within 24 hours.\n\n"
        f"---\n{_FOOTER}"
    )
    return EmailMessage(to=to, subject=ERROR_SUBJECT, html=_wrap_html(body), text=text)
