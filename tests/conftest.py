"""
Pytest configuration and shared fixtures.
"""

from typing import Any, Dict

import pytest

from wable.api import WorkableAPI
from wable.scheduler import RequestScheduler
from tests.fakes import FakeClock, FakeSession


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def workable_api(fake_session) -> WorkableAPI:
    """Client wired to the fake session, without call spacing."""
    return WorkableAPI(
        "acme",
        "test-token",
        scheduler=RequestScheduler(min_interval=0),
        session=fake_session,
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock(1_000.0)


@pytest.fixture
def sample_candidate() -> Dict[str, Any]:
    """List-view candidate as returned by /jobs/{shortcode}/candidates."""
    return {
        "id": "c1",
        "name": "Ada Lovelace",
        "email": "a@x.com",
        "stage": "Applied",
        "disqualified": False,
        "updated_at": "2024-01-02T00:00:00Z",
    }


@pytest.fixture
def sample_candidate_detail() -> Dict[str, Any]:
    """Detail candidate as returned by /candidates/{id} (unwrapped)."""
    return {
        "id": "c1",
        "name": "Ada Lovelace",
        "headline": "Analyst",
        "email": "a@x.com",
        "phone": "+44 20 0000 0000",
        "stage": "Applied",
        "created_at": "2024-01-01T10:00:00Z",
        "updated_at": "2024-01-02T00:00:00Z",
        "job": {"title": "Software Engineer", "shortcode": "SE001"},
        "skills": ["Python", {"name": "Mathematics"}],
        "tags": ["remote"],
        "resume_url": "https://files.example.com/resume.pdf?sig=abc",
        "cover_letter": "Dear team, I would like to apply.",
        "disqualified": False,
    }
