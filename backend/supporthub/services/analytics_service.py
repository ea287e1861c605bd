from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone

from supporthub.config import Settings, settings
from supporthub.models.base import ALL_ANALYSTS, SlaMetric
from supporthub.schemas.analytics import (
    AnalystMetrics,
    AnalystOption,
    AnalyticsReport,
    OverallStats,
    TicketSlaRow,
)
from supporthub.schemas.caller import CallerContext
from supporthub.schemas.ticket import TicketRecord
from supporthub.services import sla_service

UNKNOWN_ANALYST_NAME = "Desconhecido"

END_OF_DAY = time(23, 59, 59, 999000)


def window_bounds(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    """Expand two calendar days to [00:00:00.000, 23:59:59.999] in UTC."""
    start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
    end = datetime.combine(end_date, END_OF_DAY, tzinfo=timezone.utc)
    return start, end


def default_window(today: date | None = None, config: Settings = settings) -> tuple[date, date]:
    return quick_window(config.analytics_default_days, today)


def quick_window(days: int, today: date | None = None) -> tuple[date, date]:
    """Window covering the last ``days`` days up to and including today."""
    end = today or datetime.now(timezone.utc).date()
    return end - timedelta(days=days), end


def filter_by_creation_window(
    tickets: Iterable[TicketRecord], start_date: date, end_date: date
) -> list[TicketRecord]:
    """Keep tickets created inside the window, both ends inclusive, order preserved."""
    start, end = window_bounds(start_date, end_date)
    return [t for t in tickets if start <= t.created_at <= end]


def visible_tickets(
    tickets: Iterable[TicketRecord],
    caller: CallerContext,
    selected_analyst_id: str | None = ALL_ANALYSTS,
) -> list[TicketRecord]:
    """Assigned tickets the caller may aggregate over.

    Admins get everything, or one analyst when a filter is given. Anyone else
    is pinned to their own assignments and the filter is ignored.
    """
    assigned = [t for t in tickets if t.assigned_to]
    if caller.is_admin:
        if selected_analyst_id and selected_analyst_id != ALL_ANALYSTS:
            return [t for t in assigned if t.assigned_to == selected_analyst_id]
        return assigned
    return [t for t in assigned if t.assigned_to == caller.caller_id]


def compliance(tickets: Iterable[TicketRecord], metric: SlaMetric) -> float:
    """Percentage of measurable tickets within target, 0 when none are measurable."""
    within = 0
    measured = 0
    for ticket in tickets:
        result = sla_service.is_within_sla(ticket, metric)
        if result is None:
            continue
        measured += 1
        if result:
            within += 1
    return within / measured * 100 if measured else 0.0


def _mean(values: list[int]) -> float:
    return sum(values) / len(values) if values else 0.0


def compute_overall_stats(tickets: list[TicketRecord]) -> OverallStats:
    response_times = [
        m for m in (sla_service.response_minutes(t) for t in tickets) if m is not None
    ]
    resolution_times = [
        m for m in (sla_service.resolution_minutes(t) for t in tickets) if m is not None
    ]
    return OverallStats(
        total_tickets=len(tickets),
        responded_tickets=len(response_times),
        resolved_tickets=len(resolution_times),
        avg_response_time=_mean(response_times),
        avg_resolution_time=_mean(resolution_times),
        response_compliance=compliance(tickets, SlaMetric.response),
        resolution_compliance=compliance(tickets, SlaMetric.resolution),
    )


def compute_analyst_metrics(tickets: list[TicketRecord]) -> list[AnalystMetrics]:
    """Fold assigned tickets into one row per analyst, in first-encounter order.

    The response average is a running mean whose denominator is the
    analyst's ticket position, so tickets still waiting for a first reply
    pull it down. The resolution average divides by resolved tickets only.
    """
    metrics: dict[str, AnalystMetrics] = {}
    grouped: dict[str, list[TicketRecord]] = {}

    for ticket in tickets:
        if not ticket.assigned_to:
            continue
        row = metrics.get(ticket.assigned_to)
        if row is None:
            row = AnalystMetrics(
                analyst_id=ticket.assigned_to,
                analyst_name=ticket.assignee_display_name or UNKNOWN_ANALYST_NAME,
            )
            metrics[ticket.assigned_to] = row
            grouped[ticket.assigned_to] = []
        grouped[ticket.assigned_to].append(ticket)

        row.total_tickets += 1

        response = sla_service.response_minutes(ticket)
        if response is not None:
            row.avg_response_time = (
                row.avg_response_time * (row.total_tickets - 1) + response
            ) / row.total_tickets

        resolution = sla_service.resolution_minutes(ticket)
        if resolution is not None:
            row.resolved_tickets += 1
            row.avg_resolution_time = (
                row.avg_resolution_time * (row.resolved_tickets - 1) + resolution
            ) / row.resolved_tickets

    for analyst_id, row in metrics.items():
        own = grouped[analyst_id]
        row.sla_response_compliance = compliance(own, SlaMetric.response)
        row.sla_resolution_compliance = compliance(own, SlaMetric.resolution)
        row.avg_assumption_time = _mean(
            [m for m in (sla_service.assumption_minutes(t) for t in own) if m is not None]
        )

    return list(metrics.values())


def aggregate(
    tickets: list[TicketRecord],
    caller: CallerContext,
    selected_analyst_id: str | None = ALL_ANALYSTS,
) -> tuple[OverallStats, list[AnalystMetrics]]:
    """Overall and per-analyst SLA statistics for an already filtered ticket set.

    The analyst filter narrows the overall numbers only; admins always get a
    row for every analyst, other roles only their own.
    """
    visible = visible_tickets(tickets, caller, selected_analyst_id)
    overall = compute_overall_stats(visible)
    if caller.is_admin:
        per_analyst = compute_analyst_metrics([t for t in tickets if t.assigned_to])
    else:
        per_analyst = compute_analyst_metrics(visible)
    return overall, per_analyst


def analyst_options(tickets: Iterable[TicketRecord]) -> list[AnalystOption]:
    """Distinct assignees in first-encounter order, labelled with the last name seen."""
    options: dict[str, AnalystOption] = {}
    for ticket in tickets:
        if ticket.assigned_to:
            options[ticket.assigned_to] = AnalystOption(
                id=ticket.assigned_to,
                name=ticket.assignee_display_name or UNKNOWN_ANALYST_NAME,
            )
    return list(options.values())


def ticket_sla_row(ticket: TicketRecord) -> TicketSlaRow:
    return TicketSlaRow(
        id=ticket.id,
        title=ticket.title,
        priority=ticket.priority,
        created_at=ticket.created_at,
        analyst_name=ticket.assignee_display_name,
        assumption_minutes=sla_service.assumption_minutes(ticket),
        response_minutes=sla_service.response_minutes(ticket),
        resolution_minutes=sla_service.resolution_minutes(ticket),
        response_within_sla=sla_service.is_within_sla(ticket, SlaMetric.response),
        resolution_within_sla=sla_service.is_within_sla(ticket, SlaMetric.resolution),
    )


def build_report(
    tickets: list[TicketRecord],
    start_date: date,
    end_date: date,
    caller: CallerContext,
    selected_analyst_id: str | None = ALL_ANALYSTS,
    recent_limit: int | None = None,
) -> AnalyticsReport:
    """Window, aggregate and summarise tickets for the analytics view."""
    if recent_limit is None:
        recent_limit = settings.analytics_recent_limit

    filtered = filter_by_creation_window(tickets, start_date, end_date)
    overall, per_analyst = aggregate(filtered, caller, selected_analyst_id)

    if caller.is_admin:
        analysts = analyst_options(filtered)
        recent = filtered[:recent_limit]
    else:
        analysts = []
        recent = [t for t in filtered if t.assigned_to == caller.caller_id][:recent_limit]

    return AnalyticsReport(
        start=start_date,
        end=end_date,
        overall=overall,
        per_analyst=per_analyst,
        analysts=analysts,
        recent_tickets=[ticket_sla_row(t) for t in recent],
    )
