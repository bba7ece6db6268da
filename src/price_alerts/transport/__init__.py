"""Delivery channels: real-time sessions and e-mail."""
from price_alerts.transport.email import (EmailMessage, EmailTransport,
                                          LoggingEmailTransport,
                                          ResendEmailTransport)
from price_alerts.transport.realtime import ConnectionRegistry

__all__ = [
    "ConnectionRegistry",
    "EmailMessage",
    "EmailTransport",
    "LoggingEmailTransport",
    "ResendEmailTransport",
]
