from pydantic import BaseModel

from supporthub.models.base import STAFF_ROLES, UserRole


class CallerContext(BaseModel):
    role: UserRole
    caller_id: str

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES
