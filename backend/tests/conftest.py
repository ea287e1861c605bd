from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from httpx import ASGITransport, AsyncClient

from supporthub.api.dependencies import get_ticket_source
from supporthub.config import settings
from supporthub.main import create_app
from supporthub.models.base import UserRole
from supporthub.schemas.caller import CallerContext
from supporthub.schemas.ticket import TicketRecord
from supporthub.services.ticket_source import TicketSourceError

ADMIN_ID = "00000000-0000-0000-0000-00000000000a"
ANALYST_ID = "00000000-0000-0000-0000-0000000000a1"
OTHER_ANALYST_ID = "00000000-0000-0000-0000-0000000000a2"
USER_ID = "00000000-0000-0000-0000-0000000000u1"


def at(value: str) -> datetime:
    """Parse an ISO-8601 instant with a trailing Z."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def make_ticket(
    id: str = "t1",
    created_at: str = "2024-01-01T00:00:00Z",
    priority: str | None = "medium",
    first_response_at: str | None = None,
    closed_at: str | None = None,
    assigned_to: str | None = None,
    assignee_display_name: str | None = None,
    **extra,
) -> TicketRecord:
    """Build a ticket from ISO strings; unset milestones stay null."""
    return TicketRecord(
        id=id,
        priority=priority,
        created_at=at(created_at),
        first_response_at=at(first_response_at) if first_response_at else None,
        closed_at=at(closed_at) if closed_at else None,
        assigned_to=assigned_to,
        assignee_display_name=assignee_display_name,
        **extra,
    )


class FakeTicketSource:
    """In-memory stand-in for the REST-backed ticket source."""

    def __init__(self, tickets=None, roles=None, fail=False):
        self.tickets = list(tickets or [])
        self.roles = dict(roles or {})
        self.fail = fail
        self.callers: list[CallerContext] = []

    async def fetch_tickets(self, caller: CallerContext) -> list[TicketRecord]:
        if self.fail:
            raise TicketSourceError("boom")
        self.callers.append(caller)
        return list(self.tickets)

    async def fetch_role(self, user_id: str) -> UserRole:
        return self.roles.get(user_id, UserRole.user)


@pytest.fixture
def admin() -> CallerContext:
    return CallerContext(role=UserRole.admin, caller_id=ADMIN_ID)


@pytest.fixture
def analyst() -> CallerContext:
    return CallerContext(role=UserRole.analyst, caller_id=ANALYST_ID)


@pytest.fixture
def march_tickets() -> list[TicketRecord]:
    """Tickets created in March 2024, newest first as the store returns them."""
    return [
        make_ticket(
            id="m5",
            created_at="2024-03-05T09:00:00Z",
            priority="high",
            first_response_at="2024-03-05T09:30:00Z",
            closed_at="2024-03-05T12:00:00Z",
            assigned_to=OTHER_ANALYST_ID,
            assignee_display_name="Bruna Lima",
        ),
        make_ticket(
            id="m4",
            created_at="2024-03-04T10:00:00Z",
            priority="low",
            assigned_to=None,
        ),
        make_ticket(
            id="m3",
            created_at="2024-03-03T08:00:00Z",
            priority="critical",
            first_response_at="2024-03-03T09:00:00Z",
            assigned_to=ANALYST_ID,
            assignee_display_name="Carlos Souza",
        ),
        make_ticket(
            id="m2",
            created_at="2024-03-02T08:00:00Z",
            priority="medium",
            assigned_to=ANALYST_ID,
            assignee_display_name="Carlos Souza",
        ),
        make_ticket(
            id="m1",
            created_at="2024-03-01T08:00:00Z",
            priority="high",
            first_response_at="2024-03-01T08:20:00Z",
            closed_at="2024-03-01T10:00:00Z",
            assigned_to=ANALYST_ID,
            assignee_display_name="Carlos Souza",
        ),
    ]


@pytest.fixture
def ticket_source(march_tickets) -> FakeTicketSource:
    return FakeTicketSource(
        tickets=march_tickets,
        roles={
            ADMIN_ID: UserRole.admin,
            ANALYST_ID: UserRole.analyst,
            OTHER_ANALYST_ID: UserRole.analyst,
        },
    )


@pytest.fixture
async def client(ticket_source: FakeTicketSource) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client wired to the FastAPI app with a fake ticket source."""
    app = create_app()
    app.dependency_overrides[get_ticket_source] = lambda: ticket_source

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


def create_token(user_id: str, audience: str | None = None, expires_in: int = 3600) -> str:
    """Sign a token the way the auth provider does."""
    payload = {
        "sub": user_id,
        "aud": audience or settings.jwt_audience,
        "role": "authenticated",
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def auth_header(token: str) -> dict:
    """Helper to create Authorization header."""
    return {"Authorization": f"Bearer {token}"}
