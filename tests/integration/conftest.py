"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real database, the real app, and
real notification providers. Only the webhook endpoints are faked, with a
recording httpx.MockTransport, so no network traffic leaves the test.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator, AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gumboard.backend.core.database import get_db_session
from gumboard.backend.core.security import create_access_token
from gumboard.backend.core.utils import utc_now
from gumboard.backend.models import Board, ChecklistItem, Note, Organization, User
from gumboard.backend.notifications.discord import DiscordProvider
from gumboard.backend.notifications.dispatcher import DeliveryRecorder, NotificationDispatcher
from gumboard.backend.notifications.sender import WebhookSender
from gumboard.backend.notifications.slack import SlackProvider
from gumboard.backend.tasks.notifications import get_notification_dispatcher

SLACK_WEBHOOK = "https://hooks.slack.com/services/T000/B000/integration"
DISCORD_WEBHOOK = "https://discord.com/api/webhooks/1/integration"


# =============================================================================
# Webhook Fixtures
# =============================================================================


class WebhookRecorder:
    """Records webhook POSTs and answers with a configurable status."""

    def __init__(self) -> None:
        self.status_code = 200
        self.requests: list[httpx.Request] = []
        self._counter = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code)
        self._counter += 1
        return httpx.Response(200, json={"id": f"msg-{self._counter}"})

    def sent_to(self, url: str) -> list[dict[str, Any]]:
        import json

        return [json.loads(r.content) for r in self.requests if str(r.url) == url]


@pytest.fixture
def webhooks() -> WebhookRecorder:
    return WebhookRecorder()


@pytest.fixture
def dispatcher(
    webhooks: WebhookRecorder,
    db_session_factory: async_sessionmaker[AsyncSession],
) -> NotificationDispatcher:
    """
    Real dispatcher with both providers, fake webhooks, and a recorder
    that writes delivery ids through its own session.
    """

    @asynccontextmanager
    async def session_scope() -> AsyncIterator[AsyncSession]:
        async with db_session_factory() as session:
            yield session
            await session.commit()

    return NotificationDispatcher(
        providers=[SlackProvider(), DiscordProvider()],
        sender=WebhookSender(transport=httpx.MockTransport(webhooks)),
        recorder=DeliveryRecorder(session_scope),
        suppressed_board_names=[],
        enabled=True,
    )


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session: AsyncSession,
    dispatcher: NotificationDispatcher,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with database and dispatcher overrides.

    ASGITransport runs background tasks to completion before the
    response is returned, so webhook sends are visible right after a call.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    from gumboard.backend.main import create_app

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def client_no_db() -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client without any dependency overrides.

    Use this for endpoints that don't need a working database.
    """
    from gumboard.backend.main import create_app

    async with AsyncClient(
        transport=ASGITransport(app=create_app()),
        base_url="http://test",
    ) as test_client:
        yield test_client


# =============================================================================
# Seed Data
# =============================================================================


@dataclass
class Seed:
    """Two organizations, their members, and boards."""

    org: Organization
    other_org: Organization
    member: User
    outsider: User
    loner: User
    private_board: Board
    public_board: Board
    other_board: Board


@pytest.fixture
async def seed(db_session: AsyncSession) -> Seed:
    org = Organization(
        name="Acme",
        slack_webhook_url=SLACK_WEBHOOK,
        discord_webhook_url=DISCORD_WEBHOOK,
    )
    other_org = Organization(name="Globex")
    member = User(name="Ada", email="ada@acme.test", organization=org)
    outsider = User(name="Hank", email="hank@globex.test", organization=other_org)
    loner = User(name=None, email="loner@example.test")
    private_board = Board(name="Sprint", organization=org)
    public_board = Board(name="Roadmap", organization=org, is_public=True)
    other_board = Board(name="Globex Ops", organization=other_org)

    db_session.add_all([
        org, other_org, member, outsider, loner, private_board, public_board, other_board,
    ])
    await db_session.commit()

    return Seed(
        org=org,
        other_org=other_org,
        member=member,
        outsider=outsider,
        loner=loner,
        private_board=private_board,
        public_board=public_board,
        other_board=other_board,
    )


@pytest.fixture
def make_notes(db_session: AsyncSession) -> Callable[..., Any]:
    """
    Insert notes with strictly increasing created_at (index 0 is oldest).

    Usage:
        notes = await make_notes(board, user, 45)
    """

    async def _make(
        board: Board,
        user: User,
        count: int,
        **fields: Any,
    ) -> list[Note]:
        base = utc_now() - timedelta(days=1)
        notes = [
            Note(
                board_id=board.id,
                created_by=user.id,
                color="#fef3c7",
                created_at=base + timedelta(seconds=index),
                checklist_items=[ChecklistItem(content=f"Task {index}", order=0)],
                **fields,
            )
            for index in range(count)
        ]
        db_session.add_all(notes)
        await db_session.commit()
        return notes

    return _make


# =============================================================================
# Authentication Fixtures
# =============================================================================


def bearer(user: User) -> dict[str, str]:
    """Authorization header for a user."""
    return {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """
    Build authentication headers for a seeded user.

    Usage:
        async def test_protected_endpoint(client, seed, auth_headers):
            response = await client.get(url, headers=auth_headers(seed.member))
    """
    return bearer


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_status(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert the status code and return the JSON body.

        Raises:
            AssertionError: If the status does not match
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        return response.json()

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
        expected_message: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error envelope.

        Raises:
            AssertionError: If response is not an error or codes don't match
        """
        data = ApiAssertions.assert_status(response, expected_status)
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("data") is None
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )
        if expected_message:
            assert data["error"]["message"] == expected_message

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """Assert API response is a validation error (422)."""
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()
