"""Outbound e-mail delivery."""
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass

import resend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailMessage:
    subject: str
    text: str
    html: str


class EmailTransport(ABC):
    """Sends rendered messages to an address.

    Account users are referenced by id only; resolving an id to an address
    belongs to the identity service, so ``send_to_user`` records the intent.
    """

    @abstractmethod
    def send(self, to_email: str, message: EmailMessage) -> str | None:
        """Send a message; returns the provider message id when one is issued."""

    def send_to_user(self, user_id: uuid.UUID, message: EmailMessage) -> None:
        logger.info("E-mail notification for user %s: %s", user_id, message.subject)


class LoggingEmailTransport(EmailTransport):
    """Writes messages to the log instead of sending them (default, local runs)."""

    def send(self, to_email: str, message: EmailMessage) -> str | None:
        logger.info("E-mail to %s: %s", to_email, message.subject)
        logger.debug("E-mail body:\n%s", message.text)
        return None


class ResendEmailTransport(EmailTransport):
    """Sends through the Resend API."""

    def __init__(self, api_key: str, from_email: str) -> None:
        if not api_key:
            raise ValueError("RESEND_API_KEY not configured")
        self._api_key = api_key
        self._from_email = from_email

    def send(self, to_email: str, message: EmailMessage) -> str | None:
        resend.api_key = self._api_key
        response = resend.Emails.send(
            {
                "from": self._from_email,
                "to": [to_email],
                "subject": message.subject,
                "html": message.html,
                "text": message.text,
            }
        )
        email_id = response.get("id")
        logger.info("Sent e-mail %s to %s", email_id, to_email)
        return email_id
