from datetime import datetime, timedelta

from supporthub.config import Settings, settings
from supporthub.models.base import SlaMetric, TicketPriority
from supporthub.schemas.ticket import TicketRecord

ONE_MINUTE = timedelta(minutes=1)

FALLBACK_PRIORITY = TicketPriority.medium.value

# Legacy label for critical still found on older ticket rows and dashboards
PRIORITY_ALIASES = {"urgent": TicketPriority.critical.value}


def get_sla_targets(config: Settings = settings) -> dict[SlaMetric, dict[str, int]]:
    """Build the (metric, priority) -> target minutes table from settings."""
    return {
        SlaMetric.response: {
            TicketPriority.critical.value: config.sla_critical_response,
            TicketPriority.high.value: config.sla_high_response,
            TicketPriority.medium.value: config.sla_medium_response,
            TicketPriority.low.value: config.sla_low_response,
        },
        SlaMetric.resolution: {
            TicketPriority.critical.value: config.sla_critical_resolve,
            TicketPriority.high.value: config.sla_high_resolve,
            TicketPriority.medium.value: config.sla_medium_resolve,
            TicketPriority.low.value: config.sla_low_resolve,
        },
    }


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, floored. Negative when end < start."""
    return (end - start) // ONE_MINUTE


def target_minutes(
    priority: str | None, metric: SlaMetric, config: Settings = settings
) -> int:
    """Target for a priority, falling back to medium for anything unrecognized."""
    table = get_sla_targets(config)[SlaMetric(metric)]
    key = getattr(priority, "value", priority) or FALLBACK_PRIORITY
    key = PRIORITY_ALIASES.get(key, key)
    return table.get(key, table[FALLBACK_PRIORITY])


def response_minutes(ticket: TicketRecord) -> int | None:
    if ticket.first_response_at is None:
        return None
    return elapsed_minutes(ticket.created_at, ticket.first_response_at)


def resolution_minutes(ticket: TicketRecord) -> int | None:
    if ticket.closed_at is None:
        return None
    return elapsed_minutes(ticket.created_at, ticket.closed_at)


def assumption_minutes(ticket: TicketRecord) -> int | None:
    """Minutes until the ticket was taken by an analyst.

    Rows written before ``assigned_at`` existed only carry ``updated_at``,
    which is used in its place.
    """
    assigned = ticket.assigned_at or ticket.updated_at
    if assigned is None:
        return None
    return elapsed_minutes(ticket.created_at, assigned)


def is_within_sla(
    ticket: TicketRecord, metric: SlaMetric, config: Settings = settings
) -> bool | None:
    """Check a ticket against its target for one metric.

    Returns None when the milestone has not been reached yet (no first
    response, or not closed): such tickets are not measurable and must stay
    out of compliance ratios.
    """
    metric = SlaMetric(metric)
    if metric == SlaMetric.response:
        elapsed = response_minutes(ticket)
    else:
        elapsed = resolution_minutes(ticket)
    if elapsed is None:
        return None
    return elapsed <= target_minutes(ticket.priority, metric, config)
