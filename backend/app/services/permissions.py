from __future__ import annotations
from dataclasses import dataclass
from uuid import UUID

from app.config import settings
from app.models.campaign import Campaign
from app.models.submission import Submission


@dataclass(frozen=True)
class Caller:
    """Identity of the requesting user, detached from any ORM session."""
    user_id: UUID
    role: str
    verification_status: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == settings.admin_role


def is_participant_role(caller: Caller) -> bool:
    return caller.role == settings.participant_role


def is_verified(caller: Caller) -> bool:
    return caller.verification_status == "approved"


def can_manage_campaign(caller: Caller, campaign: Campaign) -> bool:
    return caller.is_admin or campaign.owner_id == caller.user_id


# Review and grading share the same authority: the campaign's creator or an admin.
can_review = can_manage_campaign
can_grade = can_manage_campaign


def can_view_submission(caller: Caller, submission: Submission, campaign: Campaign) -> bool:
    return submission.user_id == caller.user_id or can_manage_campaign(caller, campaign)
