import asyncio
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.invite_crypto import hash_code, verify_code
from app.models.event import Event
from app.models.invitation_code import InvitationCode
from app.utils.dates import utcnow, to_naive_utc
from app.utils.logger import get_logger

logger = get_logger("invitations")

CODE_MIN_LENGTH = 4
CODE_MAX_LENGTH = 50
MAX_USES_LIMIT = 1000

# Shown for every failed redemption so callers cannot tell "no codes issued",
# "wrong code" and "all codes used up" apart.
INVALID_INVITATION_MESSAGE = "Invalid invitation code or no available slots"


class InvitationService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def issue_code(
        self,
        event_id: int,
        code: str,
        max_uses: int = 1,
        expires_at: Optional[datetime] = None,
    ) -> Optional[InvitationCode]:
        """
        Store a new invitation code for an event.

        Only the salted hash is persisted; the plaintext is dropped once hashed.
        Returns None when the event does not exist.
        """
        if len(code) < CODE_MIN_LENGTH:
            raise ValueError(f"Code must be at least {CODE_MIN_LENGTH} characters")
        if len(code) > CODE_MAX_LENGTH:
            raise ValueError(f"Code must be less than {CODE_MAX_LENGTH} characters")
        if max_uses < 1:
            raise ValueError("Max uses must be at least 1")
        if max_uses > MAX_USES_LIMIT:
            raise ValueError(f"Max uses cannot exceed {MAX_USES_LIMIT}")
        expires_at = to_naive_utc(expires_at)
        if expires_at is not None and expires_at <= utcnow():
            raise ValueError("Expiry date must be in the future")

        event = await self.db.get(Event, event_id)
        if not event:
            return None

        hashed = await asyncio.to_thread(hash_code, code)
        invitation = InvitationCode(
            event_id=event_id,
            code_hash=hashed.hash,
            max_uses=max_uses,
            current_uses=0,
            expires_at=expires_at,
            active=True,
        )
        self.db.add(invitation)
        await self.db.commit()
        await self.db.refresh(invitation)
        logger.info(f"Issued invitation code {invitation.id} for event {event_id} (max_uses={max_uses})")
        return invitation

    async def list_codes(self, event_id: int) -> List[InvitationCode]:
        result = await self.db.execute(
            select(InvitationCode)
            .where(InvitationCode.event_id == event_id)
            .order_by(InvitationCode.id.desc())
        )
        return result.scalars().all()

    async def deactivate_code(self, code_id: int, event_id: Optional[int] = None) -> bool:
        query = select(InvitationCode).where(InvitationCode.id == code_id)
        if event_id is not None:
            query = query.where(InvitationCode.event_id == event_id)
        result = await self.db.execute(query)
        invitation = result.scalar_one_or_none()
        if not invitation:
            return False
        invitation.active = False
        await self.db.commit()
        logger.info(f"Deactivated invitation code {code_id}")
        return True

    async def find_matching_code(
        self, event_id: int, code: str, now: Optional[datetime] = None
    ) -> Optional[InvitationCode]:
        """Return the first usable code of the event that the plaintext verifies against."""
        now = to_naive_utc(now) or utcnow()
        try:
            result = await self.db.execute(
                select(InvitationCode).where(
                    InvitationCode.event_id == event_id,
                    InvitationCode.active.is_(True),
                )
                # counters may have moved since this session last looked
                .execution_options(populate_existing=True)
            )
            candidates = [c for c in result.scalars().all() if c.usable_at(now)]
        except SQLAlchemyError as e:
            logger.error(f"Failed to load invitation codes for event {event_id}: {e}")
            return None

        for candidate in candidates:
            # PBKDF2 is CPU bound, keep it off the event loop
            if await asyncio.to_thread(verify_code, code, candidate.code_hash):
                return candidate
        return None

    async def redeem(self, code_id: int, now: Optional[datetime] = None) -> bool:
        """
        Consume one use of a code with a single conditional UPDATE.

        The usability checks live in the WHERE clause, so two concurrent
        redemptions of the last slot cannot both succeed: only one of them
        affects a row. Does not commit; the caller owns the transaction.
        """
        now = to_naive_utc(now) or utcnow()
        stmt = (
            update(InvitationCode)
            .where(
                InvitationCode.id == code_id,
                InvitationCode.active.is_(True),
                InvitationCode.current_uses < InvitationCode.max_uses,
                or_(InvitationCode.expires_at.is_(None), InvitationCode.expires_at > now),
            )
            .values(current_uses=InvitationCode.current_uses + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def consume(
        self, event_id: int, code: str, now: Optional[datetime] = None
    ) -> Optional[InvitationCode]:
        """Match and redeem in one step. Returns the redeemed code, or None."""
        now = to_naive_utc(now) or utcnow()
        invitation = await self.find_matching_code(event_id, code, now=now)
        if invitation is None:
            logger.warning(f"Rejected invitation code for event {event_id}: no match")
            return None
        if not await self.redeem(invitation.id, now=now):
            logger.warning(f"Rejected invitation code {invitation.id} for event {event_id}: no slots left")
            return None
        return invitation
