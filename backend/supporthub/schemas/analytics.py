from datetime import date, datetime

from pydantic import BaseModel, Field


class OverallStats(BaseModel):
    total_tickets: int = Field(0, alias="totalTickets")
    responded_tickets: int = Field(0, alias="respondedTickets")
    resolved_tickets: int = Field(0, alias="resolvedTickets")
    avg_response_time: float = Field(0, alias="avgResponseTime")
    avg_resolution_time: float = Field(0, alias="avgResolutionTime")
    response_compliance: float = Field(0, alias="responseCompliance")
    resolution_compliance: float = Field(0, alias="resolutionCompliance")

    model_config = {"populate_by_name": True}


class AnalystMetrics(BaseModel):
    analyst_id: str
    analyst_name: str
    total_tickets: int = 0
    resolved_tickets: int = 0
    avg_response_time: float = 0
    avg_resolution_time: float = 0
    avg_assumption_time: float = 0
    sla_response_compliance: float = 0
    sla_resolution_compliance: float = 0


class AnalystOption(BaseModel):
    id: str
    name: str


class TicketSlaRow(BaseModel):
    id: str
    title: str | None = None
    priority: str | None = None
    created_at: datetime
    analyst_name: str | None = None
    assumption_minutes: int | None = None
    response_minutes: int | None = None
    resolution_minutes: int | None = None
    response_within_sla: bool | None = None
    resolution_within_sla: bool | None = None


class AnalyticsReport(BaseModel):
    start: date
    end: date
    overall: OverallStats
    per_analyst: list[AnalystMetrics]
    analysts: list[AnalystOption] = []
    recent_tickets: list[TicketSlaRow] = []
