"""Plan emails.

The builders turn computed plan figures into a subject and HTML body;
they hold no planning logic. Delivery goes through an EmailSender, which
reports success as a bool and never raises on delivery failure.
"""

import base64
import html
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

import httpx

from calc.formatting import format_currency
from model.links import build_allocator_url
from model.validation import validate_email
from planner_config import PlannerConfig

logger = logging.getLogger(__name__)

RESEND_API_URL = 'https://api.resend.com/emails'
RENT_PLAN_PDF_FILENAME = 'your-rent-plan.pdf'

PARAGRAPH_STYLE = 'color: #111827; font-size: 16px; line-height: 1.6; margin-bottom: 20px;'


@dataclass
class EmailAttachment:
    filename: str
    content: bytes


@dataclass
class EmailMessage:
    subject: str
    html: str
    attachments: Optional[List[EmailAttachment]] = None


class EmailSender(ABC):

    @abstractmethod
    def send(self, to: str, subject: str, html_body: str,
             attachments: Optional[List[EmailAttachment]] = None) -> bool:
        """Deliver one email; True on success."""

    def send_message(self, to: str, message: EmailMessage) -> bool:
        return self.send(to, message.subject, message.html, message.attachments)


class ResendEmailSender(EmailSender):
    """Sends through the Resend HTTP API."""

    def __init__(self, config: PlannerConfig, client: Optional[httpx.Client] = None):
        self.config = config
        self._client = client

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.config.tax_timeout_seconds)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def send(self, to: str, subject: str, html_body: str,
             attachments: Optional[List[EmailAttachment]] = None) -> bool:
        if not self.config.resend_api_key:
            logger.error("RESEND_API_KEY not configured, email not sent")
            return False

        payload = {
            'from': self.config.email_from,
            'to': validate_email(to),
            'subject': subject,
            'html': html_body,
        }
        if attachments:
            payload['attachments'] = [
                {'filename': a.filename, 'content': base64.b64encode(a.content).decode('ascii')}
                for a in attachments
            ]

        try:
            response = self._get_client().post(
                RESEND_API_URL,
                json=payload,
                headers={'Authorization': f"Bearer {self.config.resend_api_key}"},
            )
        except httpx.HTTPError as e:
            logger.error("Error sending email: %s", e)
            return False

        if response.is_error:
            logger.error("Resend error: %s %s", response.status_code, response.text)
            return False
        logger.info("Email sent: %s", subject)
        return True


def _paragraph(text: str, style: str = PARAGRAPH_STYLE) -> str:
    return f'<p style="{style}">{text}</p>'


def build_leap_plan_email(config: PlannerConfig, salary: float, state: str,
                          net_monthly: Optional[float] = None,
                          recommended_401k_pct: Optional[float] = None,
                          delta_30yr: Optional[float] = None,
                          annual_contribution_increase: Optional[float] = None,
                          leap_summary: Optional[str] = None) -> EmailMessage:
    """Trajectory summary email with a link to unlock the full Leap stack."""
    allocator_url = build_allocator_url(config, salary, state, net_monthly, recommended_401k_pct)
    summary = html.escape(leap_summary or 'Your single highest-impact Leap')

    details = f"{summary}."
    if annual_contribution_increase is not None and annual_contribution_increase > 0:
        details += f" Annual contribution increase: {format_currency(annual_contribution_increase)}."
    if delta_30yr is not None:
        details += f" 30-year compounded value: ~{format_currency(delta_30yr)} in projected net worth."

    body = '\n'.join([
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">',
        _paragraph('Hey,'),
        _paragraph("Here's your <strong>trajectory summary</strong> from the Leap Impact Simulator."),
        _paragraph(details),
        _paragraph('Unlock your full Leap stack (emergency fund target, high-APR debt, and '
                   'retirement vs brokerage split) in one place.'),
        f'<p style="text-align: center; margin: 32px 0;"><a href="{html.escape(allocator_url)}">'
        'Unlock my full Leap stack</a></p>',
        _paragraph('This link opens your allocation plan with the numbers you entered prefilled.',
                   'color: #6B7280; font-size: 14px; line-height: 1.6;'),
        _paragraph('WeLeap'),
        '</div>',
    ])
    return EmailMessage(subject='Your trajectory summary from WeLeap', html=body)


def build_rent_plan_email(pdf_bytes: Optional[bytes] = None) -> EmailMessage:
    """Rent plan email; the rendered plan PDF is attached when given."""
    items = ''.join(f'<li>{item}</li>' for item in (
        'Your monthly take-home pay breakdown',
        'Safe rent range recommendation',
        'Upfront cash needed before your first paycheck',
        'Monthly budget breakdown (50/30/20 rule)',
    ))
    body = '\n'.join([
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">',
        '<h2 style="color: #111827;">Your Personal Rent Plan</h2>',
        _paragraph("Thank you for using WeLeap's rent calculator! Your plan is attached. It includes:"),
        f'<ul style="color: #374151; line-height: 1.8;">{items}</ul>',
        _paragraph('Remember: this is an educational estimate, not financial advice.'),
        '</div>',
    ])
    attachments = [EmailAttachment(RENT_PLAN_PDF_FILENAME, pdf_bytes)] if pdf_bytes else None
    return EmailMessage(subject='Your Personal Rent Plan from WeLeap', html=body, attachments=attachments)
