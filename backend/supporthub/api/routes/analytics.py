import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from supporthub.api.dependencies import get_ticket_source, require_staff
from supporthub.models.base import ALL_ANALYSTS
from supporthub.schemas.analytics import AnalyticsReport
from supporthub.schemas.caller import CallerContext
from supporthub.services import analytics_service
from supporthub.services.ticket_source import TicketSource, TicketSourceError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/sla", response_model=AnalyticsReport)
async def get_sla_analytics(
    start: date | None = Query(None),
    end: date | None = Query(None),
    analyst_id: str = Query(ALL_ANALYSTS),
    caller: CallerContext = Depends(require_staff),
    source: TicketSource = Depends(get_ticket_source),
):
    """SLA compliance and averages for tickets created between start and end."""
    default_start, default_end = analytics_service.default_window()
    start = start or default_start
    end = end or default_end
    if start > end:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="start must not be after end",
        )

    try:
        tickets = await source.fetch_tickets(caller)
    except TicketSourceError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Ticket store unavailable")

    report = analytics_service.build_report(
        tickets, start, end, caller, selected_analyst_id=analyst_id
    )
    logger.debug(
        "Analytics %s..%s for %s: %d tickets, %d analysts",
        start,
        end,
        caller.caller_id,
        report.overall.total_tickets,
        len(report.per_analyst),
    )
    return report
