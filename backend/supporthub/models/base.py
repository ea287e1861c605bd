import enum


class UserRole(str, enum.Enum):
    user = "user"
    analyst = "analyst"
    admin = "admin"


class TicketPriority(str, enum.Enum):
    critical = "critical"
    high = "high"
    medium = "medium"
    low = "low"


class SlaMetric(str, enum.Enum):
    response = "response"
    resolution = "resolution"


# Highest privilege first
ROLE_PRECEDENCE = (UserRole.admin, UserRole.analyst, UserRole.user)

STAFF_ROLES = (UserRole.analyst, UserRole.admin)

ALL_ANALYSTS = "all"
