import asyncio
import secrets
import string
import sys
import os
from datetime import datetime, timedelta

# Add the parent directory to sys.path to allow imports from app
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.services.invitation_service import InvitationService
from app.utils.dates import utcnow

settings = get_settings()

def generate_code(length=10):
    alphabet = string.ascii_lowercase + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))

def default_expiry(now: datetime, days: int) -> datetime:
    """`days` from now, at the very end of that day."""
    return (now + timedelta(days=days)).replace(hour=23, minute=59, second=59, microsecond=999000)

async def issue_codes(event_id: int, code: str | None = None, max_uses: int = 1):
    async with SessionLocal() as db:
        service = InvitationService(db)
        code = code or generate_code()
        try:
            invitation = await service.issue_code(
                event_id,
                code,
                max_uses=max_uses,
                expires_at=default_expiry(utcnow(), settings.INVITE_DEFAULT_EXPIRY_DAYS),
            )
        except ValueError as e:
            print(f"Cannot issue code: {e}")
            return None
        if not invitation:
            print(f"Event {event_id} not found")
            return None

        # The plaintext is shown once here and never stored
        print(f"Created invitation code {invitation.id} for event {event_id}:")
        print(f"- code: {code}")
        print(f"- max uses: {invitation.max_uses}")
        print(f"- expires at (UTC): {invitation.expires_at}")
        return invitation

if __name__ == "__main__":
    usage = "Usage: python invite_manager.py <event_id> [code] [max_uses]"
    if len(sys.argv) < 2:
        print(usage)
        sys.exit(1)
    try:
        event_id = int(sys.argv[1])
        code = sys.argv[2] if len(sys.argv) > 2 else None
        max_uses = int(sys.argv[3]) if len(sys.argv) > 3 else 1
    except ValueError:
        print(usage)
        sys.exit(1)

    asyncio.run(issue_codes(event_id, code, max_uses))
