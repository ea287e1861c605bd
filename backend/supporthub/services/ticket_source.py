import logging
from typing import Any

import httpx
from pydantic import ValidationError

from supporthub.config import Settings, settings
from supporthub.models.base import ROLE_PRECEDENCE, UserRole
from supporthub.schemas.caller import CallerContext
from supporthub.schemas.ticket import TicketRecord

logger = logging.getLogger(__name__)

TICKET_COLUMNS = ",".join(
    [
        "id",
        "title",
        "priority",
        "created_at",
        "updated_at",
        "assigned_at",
        "first_response_at",
        "closed_at",
        "assigned_to",
        "profiles:assigned_to(full_name)",
    ]
)


class TicketSourceError(Exception):
    """The ticket store could not be read."""


class TicketSource:
    """Reads tickets and roles from the hosted Postgres REST endpoint."""

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "TicketSource":
        headers = {
            "apikey": config.supabase_service_key,
            "Authorization": f"Bearer {config.supabase_service_key}",
            "Accept": "application/json",
        }
        client = httpx.AsyncClient(
            base_url=f"{config.supabase_url.rstrip('/')}/rest/v1",
            headers=headers,
            timeout=config.ticket_source_timeout_seconds,
        )
        return cls(client)

    async def aclose(self) -> None:
        await self.http_client.aclose()

    async def _get(self, path: str, params: dict[str, str]) -> list[dict[str, Any]]:
        try:
            response = await self.http_client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.exception("Ticket store request failed: %s", path)
            raise TicketSourceError(f"Failed to read {path}") from exc
        try:
            data = response.json()
        except ValueError as exc:
            logger.exception("Ticket store returned a non-JSON body: %s", path)
            raise TicketSourceError(f"Unreadable response from {path}") from exc
        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            logger.error("Ticket store returned %s instead of a row list: %s", type(data).__name__, path)
            raise TicketSourceError(f"Unexpected response shape from {path}")
        return data

    async def fetch_tickets(self, caller: CallerContext) -> list[TicketRecord]:
        """Non-archived tickets, newest first.

        Staff see every ticket. Non-staff callers are scoped to the tickets
        they created, mirroring the store's own visibility rule; the analytics
        routes never reach that branch since they require a staff role.
        """
        params = {
            "select": TICKET_COLUMNS,
            "archived_at": "is.null",
            "order": "created_at.desc",
        }
        if not caller.is_staff:
            params["created_by"] = f"eq.{caller.caller_id}"

        rows = await self._get("/tickets", params)
        try:
            tickets = [self._to_record(row) for row in rows]
        except (AttributeError, KeyError, TypeError, ValueError, ValidationError) as exc:
            logger.exception("Ticket store returned a malformed ticket row")
            raise TicketSourceError("Malformed ticket row") from exc
        logger.info("Fetched %d tickets for %s", len(tickets), caller.caller_id)
        return tickets

    async def fetch_role(self, user_id: str) -> UserRole:
        """Highest-privilege role granted to a user, ``user`` if none."""
        rows = await self._get(
            "/user_roles", {"select": "role", "user_id": f"eq.{user_id}"}
        )
        granted = {row.get("role") for row in rows}
        for role in ROLE_PRECEDENCE:
            if role.value in granted:
                return role
        return UserRole.user

    @staticmethod
    def _to_record(row: dict[str, Any]) -> TicketRecord:
        profile = row.get("profiles") or {}
        return TicketRecord(
            id=str(row["id"]),
            title=row.get("title"),
            priority=row.get("priority"),
            created_at=row["created_at"],
            updated_at=row.get("updated_at"),
            assigned_at=row.get("assigned_at"),
            first_response_at=row.get("first_response_at"),
            closed_at=row.get("closed_at"),
            assigned_to=row.get("assigned_to"),
            assignee_display_name=profile.get("full_name"),
        )
