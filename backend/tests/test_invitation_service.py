import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import select

from app.models.invitation_code import InvitationCode
from app.services.invitation_service import InvitationService
from app.utils.dates import utcnow
from tests.conftest import make_event


@pytest.mark.asyncio
async def test_issue_code_stores_only_the_hash(db, event):
    service = InvitationService(db)

    invitation = await service.issue_code(event.id, "music-lumina-2024", max_uses=5)

    assert invitation.current_uses == 0
    assert invitation.active is True
    assert invitation.max_uses == 5
    assert "music-lumina-2024" not in invitation.code_hash
    assert len(invitation.code_hash) == 32 + 1 + 64


@pytest.mark.asyncio
async def test_issue_code_for_unknown_event(db):
    service = InvitationService(db)

    assert await service.issue_code(999, "music-lumina-2024") is None


@pytest.mark.asyncio
async def test_issue_code_rejects_past_expiry(db, event):
    service = InvitationService(db)

    with pytest.raises(ValueError):
        await service.issue_code(event.id, "too-late", expires_at=utcnow() - timedelta(minutes=1))


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["ab", "abc", "x" * 51, "x" * 200])
async def test_issue_code_rejects_bad_length(db, event, code):
    service = InvitationService(db)

    with pytest.raises(ValueError):
        await service.issue_code(event.id, code)

    result = await db.execute(select(InvitationCode).where(InvitationCode.event_id == event.id))
    assert result.scalars().all() == []


@pytest.mark.asyncio
@pytest.mark.parametrize("max_uses", [0, 1001])
async def test_issue_code_rejects_max_uses_out_of_range(db, event, max_uses):
    service = InvitationService(db)

    with pytest.raises(ValueError):
        await service.issue_code(event.id, "valid-code", max_uses=max_uses)


@pytest.mark.asyncio
async def test_issue_code_accepts_length_bounds(db, event):
    service = InvitationService(db)

    shortest = await service.issue_code(event.id, "abcd")
    longest = await service.issue_code(event.id, "x" * 50, max_uses=1000)

    assert shortest is not None
    assert longest.max_uses == 1000


@pytest.mark.asyncio
async def test_find_matching_code_picks_the_right_one(db, event):
    service = InvitationService(db)
    await service.issue_code(event.id, "first-code")
    second = await service.issue_code(event.id, "second-code")

    match = await service.find_matching_code(event.id, "second-code")

    assert match.id == second.id
    assert await service.find_matching_code(event.id, "third-code") is None


@pytest.mark.asyncio
async def test_code_is_bound_to_its_event(db, event):
    other_event = await make_event(db, title="Masterclass with a guest pianist")
    service = InvitationService(db)
    await service.issue_code(event.id, "music-lumina-2024")

    assert await service.find_matching_code(other_event.id, "music-lumina-2024") is None
    assert await service.consume(other_event.id, "music-lumina-2024") is None


@pytest.mark.asyncio
async def test_expiry_boundary_is_strict(db, event):
    service = InvitationService(db)
    expires_at = (utcnow() + timedelta(days=1)).replace(microsecond=0)
    invitation = await service.issue_code(event.id, "expiring-code", expires_at=expires_at)

    assert await service.find_matching_code(event.id, "expiring-code", now=expires_at) is None
    assert await service.redeem(invitation.id, now=expires_at) is False

    just_before = expires_at - timedelta(seconds=1)
    assert (await service.find_matching_code(event.id, "expiring-code", now=just_before)).id == invitation.id
    assert await service.redeem(invitation.id, now=just_before) is True


@pytest.mark.asyncio
async def test_exhaustion_boundary(db, event):
    service = InvitationService(db)
    invitation = await service.issue_code(event.id, "three-uses", max_uses=3)
    invitation.current_uses = 2
    await db.commit()

    assert await service.find_matching_code(event.id, "three-uses") is not None
    assert await service.redeem(invitation.id) is True
    await db.commit()

    assert await service.find_matching_code(event.id, "three-uses") is None
    assert await service.redeem(invitation.id) is False


@pytest.mark.asyncio
async def test_deactivated_code_cannot_be_used(db, event):
    service = InvitationService(db)
    invitation = await service.issue_code(event.id, "soon-disabled")

    assert await service.deactivate_code(invitation.id, event_id=event.id) is True

    assert await service.find_matching_code(event.id, "soon-disabled") is None
    assert await service.redeem(invitation.id) is False
    # soft lifecycle: the row is still there
    codes = await service.list_codes(event.id)
    assert [c.id for c in codes] == [invitation.id]
    assert codes[0].active is False


@pytest.mark.asyncio
async def test_deactivate_unknown_code(db, event):
    service = InvitationService(db)

    assert await service.deactivate_code(12345) is False


def test_usable_at_rules():
    now = utcnow()
    code = InvitationCode(active=True, max_uses=2, current_uses=1, expires_at=None)
    assert code.usable_at(now)

    code.current_uses = 2
    assert not code.usable_at(now)

    code.current_uses = 0
    code.expires_at = now
    assert not code.usable_at(now)

    code.expires_at = now + timedelta(microseconds=1)
    assert code.usable_at(now)

    code.active = False
    assert not code.usable_at(now)


@pytest.mark.asyncio
async def test_concurrent_redemptions_of_last_slot(session_factory, event):
    async with session_factory() as session:
        invitation = await InvitationService(session).issue_code(event.id, "last-slot", max_uses=3)
        invitation.current_uses = 2
        await session.commit()
        code_id = invitation.id

    async def attempt():
        async with session_factory() as session:
            redeemed = await InvitationService(session).redeem(code_id)
            await session.commit()
            return redeemed

    results = await asyncio.gather(*(attempt() for _ in range(8)))

    assert results.count(True) == 1
    assert results.count(False) == 7
    async with session_factory() as session:
        stored = (await session.execute(
            select(InvitationCode).where(InvitationCode.id == code_id)
        )).scalar_one()
        assert stored.current_uses == 3


@pytest.mark.asyncio
async def test_concurrent_consume_never_over_redeems(session_factory, event):
    async with session_factory() as session:
        invitation = await InvitationService(session).issue_code(event.id, "two-seats", max_uses=2)
        code_id = invitation.id

    async def attempt():
        async with session_factory() as session:
            redeemed = await InvitationService(session).consume(event.id, "two-seats")
            await session.commit()
            return redeemed is not None

    results = await asyncio.gather(*(attempt() for _ in range(6)))

    assert results.count(True) == 2
    async with session_factory() as session:
        stored = await session.get(InvitationCode, code_id)
        assert stored.current_uses == 2
