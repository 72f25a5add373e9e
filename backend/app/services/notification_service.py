import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class NotificationService:
    """
    Forwards registration events to the configured webhook, which fans them
    out to WhatsApp, the Lark base and the confirmation e-mail.
    """

    def __init__(self, webhook_url: Optional[str] = None, timeout: Optional[float] = None):
        self.webhook_url = webhook_url if webhook_url is not None else settings.REGISTRATION_WEBHOOK_URL
        self.timeout = timeout or settings.WEBHOOK_TIMEOUT_SECONDS

    async def notify_registration(self, payload: Dict[str, Any]) -> bool:
        """
        Post a registration summary. Failures are logged and never raised,
        a registration is already stored by the time this runs.
        """
        if not self.webhook_url:
            logger.warning("REGISTRATION_WEBHOOK_URL not configured, skipping registration notification.")
            return False

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json={"type": "registration.created", "data": payload},
                )
                response.raise_for_status()
            logger.info(f"Registration notification sent for registration {payload.get('id')}")
            return True
        except httpx.HTTPError as e:
            logger.error(f"Registration notification failed: {e}")
            return False


def registration_payload(registration, event_title: str) -> Dict[str, Any]:
    return {
        "id": registration.id,
        "event_id": registration.event_id,
        "event_title": event_title,
        "participant_name": registration.participant_name,
        "registrant_name": registration.registrant_name,
        "registrant_email": registration.registrant_email,
        "registrant_whatsapp": registration.registrant_whatsapp,
        "waitlist": registration.invitation_code_id is not None,
    }
