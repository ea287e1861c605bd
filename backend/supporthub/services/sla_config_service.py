from supporthub.config import Settings, settings
from supporthub.models.base import SlaMetric, TicketPriority
from supporthub.schemas.sla_config import SlaConfigItem
from supporthub.services.sla_service import get_sla_targets


PRIORITY_ORDER = {p.value: i for i, p in enumerate(TicketPriority)}


def get_all(config: Settings = settings) -> list[SlaConfigItem]:
    targets = get_sla_targets(config)
    rows = [
        SlaConfigItem(
            priority=priority,
            target_response_minutes=targets[SlaMetric.response][priority],
            target_resolution_minutes=targets[SlaMetric.resolution][priority],
        )
        for priority in targets[SlaMetric.response]
    ]
    rows.sort(key=lambda r: PRIORITY_ORDER.get(r.priority.value, 99))
    return rows
