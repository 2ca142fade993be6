from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, computed_field


class AppRole(str, Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"


class UserRole(BaseModel):
    id: int | None = None
    user_id: str
    role: AppRole
    created_at: datetime | None = None


class AdminSession(BaseModel):
    """Role state for one signed-in user.

    ``is_admin`` is false while an admin is viewing the dashboard as a
    customer, even though ``is_actual_admin`` stays true.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str | None = None
    is_actual_admin: bool = False
    is_viewing_as_customer: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_admin(self) -> bool:
        return self.is_actual_admin and not self.is_viewing_as_customer

    def toggle_view_mode(self) -> AdminSession:
        return self.model_copy(update={"is_viewing_as_customer": not self.is_viewing_as_customer})
