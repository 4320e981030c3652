"""
Confirmation notifications sent when staff confirm a booking.

``EmailJSRelay`` posts to the EmailJS REST API. When credentials are not
configured, ``build_relay`` falls back to ``LoggingRelay``, which records
the would-be message and reports it as not sent.

Relays report failures through ``SendResult`` rather than raising; the
status-transition flow logs them and carries on.
"""

import logging
from typing import Optional, Protocol

import httpx

from service_booking.config import NotificationConfig, settings
from service_booking.schemas.notification_schema import ConfirmationMessage, SendResult

logger = logging.getLogger(__name__)

DEFAULT_RECIPIENT_NAME = "Valued Customer"
DEFAULT_PLATE = "Not provided"


class NotificationRelay(Protocol):
    async def send_confirmation(self, message: ConfirmationMessage) -> SendResult: ...


def build_template_params(message: ConfirmationMessage, default_branch: str) -> dict[str, str]:
    """Map a confirmation onto the EmailJS template variables."""
    return {
        "to_name": message.recipient_name or DEFAULT_RECIPIENT_NAME,
        "to_email": message.recipient_email or "",
        "appointment_date": message.date,
        "appointment_time": message.time,
        "car_number": message.plate or DEFAULT_PLATE,
        "branch": message.branch or default_branch,
    }


class EmailJSRelay:
    """Sends confirmation emails through the EmailJS REST endpoint."""

    def __init__(
        self,
        config: Optional[NotificationConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        default_branch: Optional[str] = None,
    ) -> None:
        self._config = config or settings.notifications
        self._client = client
        self._default_branch = default_branch or settings.business.default_branch

    async def send_confirmation(self, message: ConfirmationMessage) -> SendResult:
        if not message.recipient_email:
            logger.warning("Confirmation not sent: recipient email is required")
            return SendResult(
                sent=False,
                message="Failed to send confirmation email",
                error="Recipient email is required",
            )

        payload = {
            "service_id": self._config.emailjs_service_id,
            "template_id": self._config.emailjs_template_id,
            "user_id": self._config.emailjs_public_key,
            "template_params": build_template_params(message, self._default_branch),
        }

        try:
            if self._client is not None:
                response = await self._client.post(self._config.emailjs_api_url, json=payload)
            else:
                async with httpx.AsyncClient(timeout=self._config.timeout_sec) as client:
                    response = await client.post(self._config.emailjs_api_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Failed to send confirmation email to %s: %s",
                         message.recipient_email, exc)
            return SendResult(
                sent=False, message="Failed to send confirmation email", error=str(exc)
            )

        logger.info("Confirmation email sent to %s", message.recipient_email)
        return SendResult(sent=True, message="Confirmation email sent successfully")


class LoggingRelay:
    """Stand-in relay used when no email provider is configured."""

    async def send_confirmation(self, message: ConfirmationMessage) -> SendResult:
        logger.info(
            "Email provider not configured; skipping confirmation for %s on %s at %s",
            message.recipient_email or message.recipient_name, message.date, message.time,
        )
        return SendResult(sent=False, message="Email provider not configured")


def build_relay(config: Optional[NotificationConfig] = None) -> NotificationRelay:
    """Return an EmailJS relay when credentials are present, else a logging relay."""
    config = config or settings.notifications
    if config.emailjs_configured:
        return EmailJSRelay(config=config)
    logger.debug("EMAILJS_* not set; confirmations will only be logged")
    return LoggingRelay()
