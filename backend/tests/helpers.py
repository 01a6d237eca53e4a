"""Row factories and auth helpers shared by the test modules."""
from __future__ import annotations
import uuid
from datetime import datetime, timedelta, timezone

from app.auth_deps import caller_of
from app.models.user import User
from app.models.campaign import Campaign
from app.models.project import Project
from app.models.participation import Participation
from app.models.submission import Submission
from app.models.engagement import CampaignLike
from app.security import hash_password, make_access_token

PASSWORD = "supersecret"
_PASSWORD_HASH = hash_password(PASSWORD)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class Factory:
    """Seeds rows through short-lived sessions so every request and service call reads committed state."""

    def __init__(self, maker):
        self.maker = maker

    async def _save(self, obj):
        async with self.maker() as s:
            s.add(obj)
            await s.commit()
            await s.refresh(obj)
        return obj

    async def user(self, *, role: str = "student", verification_status: str = "approved", username: str | None = None) -> User:
        tag = uuid.uuid4().hex[:8]
        return await self._save(User(
            email=f"{tag}@example.com",
            username=username or f"user_{tag}",
            password_hash=_PASSWORD_HASH,
            role=role,
            verification_status=verification_status,
        ))

    async def campaign(self, owner: User, **fields) -> Campaign:
        now = now_utc()
        values = dict(
            title="Green Energy Challenge",
            description="Build something that saves power",
            status="active",
            funding_trail=True,
            registration_start=now - timedelta(days=10),
            registration_end=now + timedelta(days=10),
            submission_start=now - timedelta(days=1),
            submission_end=now + timedelta(days=7),
        )
        values.update(fields)
        return await self._save(Campaign(owner_id=owner.id, **values))

    async def project(self, owner: User, **fields) -> Project:
        values = dict(title="Solar Kiosk", description="Off-grid charging")
        values.update(fields)
        return await self._save(Project(owner_id=owner.id, **values))

    async def participation(self, campaign: Campaign, user: User, *, status: str = "approved") -> Participation:
        return await self._save(Participation(
            campaign_id=campaign.id,
            user_id=user.id,
            motivation="I want to learn by building",
            experience="Two hackathons and a thesis",
            status=status,
            submission_status="not_submitted",
            submitted_at=now_utc(),
        ))

    async def submission(self, participation: Participation, **fields) -> Submission:
        values = dict(
            project_title="Grid Saver",
            project_description="Cuts standby power in dorms",
            project_screenshots=["https://example.com/1.png"],
            project_links={},
            status="submitted",
            submission_date=now_utc(),
        )
        values.update(fields)
        return await self._save(Submission(
            campaign_id=participation.campaign_id,
            user_id=participation.user_id,
            participation_id=participation.id,
            **values,
        ))

    async def campaign_like(self, campaign: Campaign, user: User) -> CampaignLike:
        return await self._save(CampaignLike(campaign_id=campaign.id, user_id=user.id))

    async def get(self, model, ident):
        async with self.maker() as s:
            return await s.get(model, ident)


def auth(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_access_token(str(user.id))}"}


def caller(user: User):
    return caller_of(user)


