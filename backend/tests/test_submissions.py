from __future__ import annotations
import asyncio
from datetime import datetime, timedelta, timezone
import uuid
import httpx
import pytest
from httpx import AsyncClient
from sqlalchemy import select, func
from app.main import app
from app.errors import Forbidden, NotFound, InvalidState, Conflict
from app.models.participation import Participation
from app.models.submission import Submission
from app.schemas.submission import SubmissionCreate
from app.services import submissions
from app.services.submissions import submit, get_submission, list_for_user
from helpers import Factory, auth, caller

START = datetime(2025, 5, 1, 9, 0, tzinfo=timezone.utc)
END = datetime(2025, 5, 8, 9, 0, tzinfo=timezone.utc)

PROJECT = {
    "project_title": "Grid Saver",
    "project_description": "Cuts standby power in student dorms",
    "project_screenshots": ["https://example.com/shot-1.png"],
    "project_links": {"github_url": "https://github.com/example/grid-saver"},
}


def _payload(**overrides) -> SubmissionCreate:
    return SubmissionCreate(**{**PROJECT, **overrides})


async def _approved(factory, **campaign_fields):
    creator = await factory.user(role="creator")
    student = await factory.user()
    ch = await factory.campaign(creator, submission_start=START, submission_end=END, **campaign_fields)
    p = await factory.participation(ch, student, status="approved")
    return creator, student, ch, p


@pytest.mark.asyncio
@pytest.mark.parametrize("now", [START, END, START + timedelta(days=3)])
async def test_submit_inside_window_including_edges(factory, session, now):
    _, student, ch, p = await _approved(factory)

    sub = await submit(session, caller(student), ch.id, _payload(), now=now)
    assert sub.status == "submitted"
    assert sub.participation_id == p.id
    assert sub.project_links == {"github_url": "https://github.com/example/grid-saver"}

    stored = await factory.get(Participation, p.id)
    assert stored.submission_status == "submitted"


@pytest.mark.asyncio
@pytest.mark.parametrize("now,code", [
    (START - timedelta(seconds=1), "window_not_open"),
    (END + timedelta(seconds=1), "window_closed"),
])
async def test_submit_outside_window(factory, session, now, code):
    _, student, ch, p = await _approved(factory)

    with pytest.raises(InvalidState) as exc:
        await submit(session, caller(student), ch.id, _payload(), now=now)
    assert exc.value.code == code

    stored = await factory.get(Participation, p.id)
    assert stored.submission_status == "not_submitted"


@pytest.mark.asyncio
async def test_open_ended_window(factory, session):
    creator = await factory.user(role="creator")
    student = await factory.user()
    open_ch = await factory.campaign(creator, submission_start=None, submission_end=None)
    await factory.participation(open_ch, student)

    sub = await submit(session, caller(student), open_ch.id, _payload(), now=START - timedelta(days=365))
    assert sub.campaign_id == open_ch.id


@pytest.mark.asyncio
@pytest.mark.parametrize("status", ["pending", "rejected"])
async def test_submit_requires_approved_participation(factory, session, status):
    creator = await factory.user(role="creator")
    student = await factory.user()
    ch = await factory.campaign(creator, submission_start=START, submission_end=END)
    await factory.participation(ch, student, status=status)

    with pytest.raises(Forbidden) as exc:
        await submit(session, caller(student), ch.id, _payload(), now=START)
    assert exc.value.code == "not_approved"


@pytest.mark.asyncio
async def test_submit_without_participation_or_campaign(factory, session):
    creator = await factory.user(role="creator")
    student = await factory.user()
    ch = await factory.campaign(creator, submission_start=START, submission_end=END)

    with pytest.raises(Forbidden):
        await submit(session, caller(student), ch.id, _payload(), now=START)
    with pytest.raises(NotFound):
        await submit(session, caller(student), uuid.uuid4(), _payload(), now=START)
    with pytest.raises(Forbidden):
        await submit(session, caller(creator), ch.id, _payload(), now=START)


@pytest.mark.asyncio
async def test_one_submission_per_participation(factory, session):
    _, student, ch, _ = await _approved(factory)

    await submit(session, caller(student), ch.id, _payload(), now=START)
    with pytest.raises(Conflict):
        await submit(session, caller(student), ch.id, _payload(project_title="Another go"), now=START)


@pytest.mark.asyncio
async def test_concurrent_submits_store_one_submission(file_session_maker):
    _, student, ch, p = await _approved(Factory(file_session_maker))

    async with file_session_maker() as s1, file_session_maker() as s2:
        results = await asyncio.gather(
            submit(s1, caller(student), ch.id, _payload(), now=START),
            submit(s2, caller(student), ch.id, _payload(project_title="Second tab"), now=START),
            return_exceptions=True,
        )
    assert sorted(type(r).__name__ for r in results) == ["Conflict", "Submission"]

    async with file_session_maker() as s:
        stored = await s.scalar(select(func.count()).select_from(Submission).where(Submission.participation_id == p.id))
    assert stored == 1


@pytest.mark.asyncio
async def test_submit_maps_constraint_violation_to_conflict(factory, session, monkeypatch):
    _, student, ch, p = await _approved(factory)
    await factory.submission(p)

    # The check misses a submission committed by a concurrent request
    async def stale_check(*args):
        return False

    monkeypatch.setattr(submissions, "_already_submitted", stale_check)

    with pytest.raises(Conflict):
        await submit(session, caller(student), ch.id, _payload(project_title="Another go"), now=START)
    assert (await factory.get(Participation, p.id)).submission_status == "not_submitted"


@pytest.mark.asyncio
async def test_submission_visibility(factory, session):
    creator, student, ch, p = await _approved(factory)
    stranger = await factory.user()
    admin = await factory.user(role="admin")
    sub = await factory.submission(p)

    assert (await get_submission(session, caller(student), sub.id)).id == sub.id
    assert (await get_submission(session, caller(creator), sub.id)).id == sub.id
    assert (await get_submission(session, caller(admin), sub.id)).id == sub.id
    with pytest.raises(Forbidden):
        await get_submission(session, caller(stranger), sub.id)
    with pytest.raises(NotFound):
        await get_submission(session, caller(admin), uuid.uuid4())

    assert [s.id for s in await list_for_user(session, caller(student), student.id)] == [sub.id]
    with pytest.raises(Forbidden):
        await list_for_user(session, caller(stranger), student.id)


def test_payload_validation():
    with pytest.raises(ValueError):
        _payload(project_title="ab")
    with pytest.raises(ValueError):
        _payload(project_description="too short")
    with pytest.raises(ValueError):
        _payload(project_screenshots=[])
    with pytest.raises(ValueError):
        _payload(project_screenshots=["ftp://example.com/shot.png"])
    with pytest.raises(ValueError):
        _payload(project_links={"demo_url": "not a url"})


@pytest.mark.asyncio
async def test_submission_api(factory):
    now = datetime.now(timezone.utc)
    creator = await factory.user(role="creator")
    student = await factory.user()
    ch = await factory.campaign(creator, submission_start=now - timedelta(hours=1), submission_end=now + timedelta(days=1))
    await factory.participation(ch, student)

    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        r = await ac.post(f"/campaigns/{ch.id}/submit", headers=auth(student), json={**PROJECT, "project_screenshots": []})
        assert r.status_code == 422

        r = await ac.post(f"/campaigns/{ch.id}/submit", headers=auth(student), json=PROJECT)
        assert r.status_code == 201, r.text
        sub = r.json()
        assert sub["status"] == "submitted"
        assert sub["score"] is None

        r = await ac.post(f"/campaigns/{ch.id}/submit", headers=auth(student), json=PROJECT)
        assert r.status_code == 409

        r = await ac.get(f"/campaigns/{ch.id}/participation-status", headers=auth(student))
        assert r.json()["participation"]["submission_status"] == "submitted"

        listed = await ac.get(f"/campaigns/{ch.id}/submissions", headers=auth(creator))
        assert [s["id"] for s in listed.json()] == [sub["id"]]
        assert (await ac.get(f"/campaigns/{ch.id}/submissions", headers=auth(student))).status_code == 403

        mine = await ac.get(f"/submissions/user/{student.id}", headers=auth(student))
        assert [s["id"] for s in mine.json()] == [sub["id"]]
        assert (await ac.get(f"/submissions/{sub['id']}", headers=auth(creator))).status_code == 200


@pytest.mark.asyncio
async def test_submit_after_window_via_api(factory):
    now = datetime.now(timezone.utc)
    creator = await factory.user(role="creator")
    student = await factory.user()
    ch = await factory.campaign(creator, submission_start=now - timedelta(days=3), submission_end=now - timedelta(days=1))
    await factory.participation(ch, student)

    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        r = await ac.post(f"/campaigns/{ch.id}/submit", headers=auth(student), json=PROJECT)
        assert r.status_code == 400
        assert r.json()["code"] == "window_closed"
