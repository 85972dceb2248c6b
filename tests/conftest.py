import os
import tempfile
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="fitscore-test-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from fitscore.app import app
from fitscore.core.database import get_session
from fitscore.models import Participant, StationResult
from fitscore.scoring.aggregate import grade_for
from fitscore.scoring.ranking import LeaderboardEntry

EVENT_START = datetime(2025, 9, 20, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture(name="client")
def client_fixture(session):
    app.dependency_overrides[get_session] = lambda: session
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def make_entry(
    code,
    total,
    minute=0,
    *,
    name=None,
    organisation=None,
    completed=None,
    balance=None,
    breath=None,
    grip=None,
    health=None,
    id=None,
):
    """Build an unranked leaderboard entry finishing ``minute`` minutes into the event."""

    if completed is None:
        completed = 0 if total is None else 4
    return LeaderboardEntry(
        id=id if id is not None else code,
        participant_code=code,
        name=name or f"Participant {code}",
        organisation=organisation,
        gender=None,
        balance=balance,
        breath=breath,
        grip=grip,
        health=health,
        total_score=total,
        completed_stations=completed,
        grade=grade_for(total, completed),
        latest_completion=None if total is None else EVENT_START + timedelta(minutes=minute),
    )


def add_participant(session, code, name, organisation=None, gender=None):
    participant = Participant(
        participant_code=code, name=name, organisation=organisation, gender=gender
    )
    session.add(participant)
    session.commit()
    session.refresh(participant)
    return participant


def add_result(session, participant, station_type, score, minute=0):
    result = StationResult(
        participant_id=participant.id,
        station_type=station_type,
        measurements_json="{}",
        score=score,
        created_at=EVENT_START + timedelta(minutes=minute),
    )
    session.add(result)
    session.commit()
    return result
