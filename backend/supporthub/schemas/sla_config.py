from pydantic import BaseModel

from supporthub.models.base import TicketPriority


class SlaConfigItem(BaseModel):
    priority: TicketPriority
    target_response_minutes: int
    target_resolution_minutes: int
