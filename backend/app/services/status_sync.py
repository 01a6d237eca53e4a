from __future__ import annotations
from app.models.participation import Participation
from app.models.submission import Submission

NOT_SUBMITTED = "not_submitted"


def submission_status_for(submission: Submission | None) -> str:
    """Participation.submission_status as a function of its submission (one-way)."""
    if submission is None:
        return NOT_SUBMITTED
    return submission.status


def propagate_submission_status(participation: Participation, submission: Submission | None) -> str:
    """Copy the submission's status onto its participation; the caller commits both."""
    status = submission_status_for(submission)
    participation.submission_status = status
    return status
