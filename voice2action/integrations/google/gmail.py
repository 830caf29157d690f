"""Gmail collaborator: sends confirmed email actions."""

from __future__ import annotations

import asyncio
import base64
from collections.abc import Callable
from email.message import EmailMessage
from pathlib import Path
from typing import Any

from loguru import logger

from voice2action.confirmations.models import EmailPayload
from voice2action.errors import DeliveryError
from voice2action.integrations.google.oauth import build_service


def encode_message(payload: EmailPayload) -> str:
    """RFC 2822 message, base64url encoded as the Gmail API expects."""
    msg = EmailMessage()
    msg["To"] = payload.to
    msg["Subject"] = payload.subject
    msg.set_content(payload.body)
    return base64.urlsafe_b64encode(msg.as_bytes()).decode("ascii")


class GmailService:
    def __init__(
        self,
        token_path: Path,
        service_factory: Callable[[], Any] | None = None,
    ) -> None:
        self._factory = service_factory or (lambda: build_service("gmail", "v1", token_path))
        self._service: Any = None

    async def send(self, payload: EmailPayload) -> str:
        if not payload.to:
            raise DeliveryError("Recipient email address is required")

        if self._service is None:
            self._service = await asyncio.to_thread(self._factory)

        raw = encode_message(payload)
        try:
            res = await asyncio.to_thread(
                lambda: self._service.users().messages().send(userId="me", body={"raw": raw}).execute()
            )
        except Exception as e:
            logger.error(f"Error sending email: {e}")
            raise DeliveryError(f"Failed to send email: {e}") from e

        logger.info(f"Email sent successfully: {res.get('id')}")
        return f"Email sent to {payload.to}"
