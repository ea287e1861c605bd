from supporthub.models.base import (
    ALL_ANALYSTS,
    ROLE_PRECEDENCE,
    STAFF_ROLES,
    SlaMetric,
    TicketPriority,
    UserRole,
)

__all__ = [
    "ALL_ANALYSTS",
    "ROLE_PRECEDENCE",
    "STAFF_ROLES",
    "SlaMetric",
    "TicketPriority",
    "UserRole",
]
