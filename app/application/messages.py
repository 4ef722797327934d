from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

from app.domain.entities import IdentityZone
from app.domain.ports.message_port import MessagePort, MessageType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessageBranding:
    service_name: str = "Identity"
    base_url: str = "http://localhost:8080"

    def service_for(self, zone: IdentityZone) -> str:
        return self.service_name if zone.is_default else zone.name

    def link(self, path: str, **params: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}?{urlencode(params)}"


def activation_message(
    branding: MessageBranding, zone: IdentityZone, email: str, code: str
) -> tuple[str, str]:
    service = branding.service_for(zone)
    subject = f"Activate your {service} account"
    body = (
        f"Hi {email},\n\n"
        f"Please confirm your email address to activate your {service} account:\n"
        f"{branding.link('/verify_user', code=code)}\n\n"
        "If you did not sign up, ignore this message."
    )
    return subject, body


def password_reset_message(
    branding: MessageBranding, zone: IdentityZone, email: str, code: str
) -> tuple[str, str]:
    service = branding.service_for(zone)
    subject = f"{service} password reset request"
    body = (
        f"Hi {email},\n\n"
        f"Use the link below to choose a new {service} password:\n"
        f"{branding.link('/reset_password', code=code, email=email)}\n\n"
        "If you did not ask for a reset, ignore this message."
    )
    return subject, body


async def deliver(
    messages: MessagePort,
    *,
    recipient: str,
    category: MessageType,
    subject: str,
    content: str,
) -> bool:
    """Send and report success. State has already committed, so failures are only logged."""
    try:
        await messages.send(
            recipient=recipient, category=category, subject=subject, content=content
        )
    except Exception:  # noqa: BLE001
        logger.error(
            "message delivery failed",
            extra={"category": MessageType(category).value},
            exc_info=True,
        )
        return False
    return True
