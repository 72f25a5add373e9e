from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from app.core.database import Base
from app.utils.dates import to_naive_utc

class InvitationCode(Base):
    __tablename__ = "invitation_codes"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), index=True, nullable=False)
    # "<salt_hex>:<derived_key_hex>", never the plaintext
    code_hash = Column(String(200), nullable=False)
    max_uses = Column(Integer, nullable=False, default=1)
    current_uses = Column(Integer, nullable=False, default=0)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def usable_at(self, now) -> bool:
        # expiry is strict: a code expiring exactly at `now` is already unusable
        expires_at = to_naive_utc(self.expires_at)
        return (
            bool(self.active)
            and self.current_uses < self.max_uses
            and (expires_at is None or expires_at > to_naive_utc(now))
        )
