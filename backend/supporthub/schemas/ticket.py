from datetime import datetime, timezone

from pydantic import BaseModel, field_validator


class TicketRecord(BaseModel):
    """Read-only ticket row as delivered by the ticket store.

    Only ``id`` and ``created_at`` are required; every milestone timestamp is
    nullable. ``priority`` is kept as a plain string so that values outside
    the known set reach the SLA lookup and take its fallback.
    """

    id: str
    title: str | None = None
    priority: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    assigned_at: datetime | None = None
    first_response_at: datetime | None = None
    closed_at: datetime | None = None
    assigned_to: str | None = None
    assignee_display_name: str | None = None

    model_config = {"from_attributes": True, "frozen": True}

    @field_validator(
        "created_at", "updated_at", "assigned_at", "first_response_at", "closed_at"
    )
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
