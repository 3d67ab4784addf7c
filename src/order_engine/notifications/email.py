"""Outbound email collaborator."""

from typing import Protocol

from order_engine.utils.logging import get_logger

logger = get_logger(__name__)


class EmailSender(Protocol):
    """Anything that can deliver a plain-text email."""

    async def send(self, to: str, subject: str, text: str, html: str | None = None) -> None:
        ...


class LoggingEmailSender:
    """Email sender that records messages in the log instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[dict[str, str | None]] = []

    async def send(self, to: str, subject: str, text: str, html: str | None = None) -> None:
        self.sent.append({"to": to, "subject": subject, "text": text, "html": html})
        logger.info("email_sent", to=to, subject=subject, length=len(text))
