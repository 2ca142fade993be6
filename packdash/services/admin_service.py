from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from packdash.models.admin import AdminSession, AppRole, UserRole
from packdash.repositories.base import RoleRepository

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, role_repo: RoleRepository) -> None:
        self.role_repo = role_repo

    def is_actual_admin(self, user_id: str | None) -> bool:
        if not user_id:
            return False
        try:
            return self.role_repo.has_role(user_id, AppRole.ADMIN)
        except SQLAlchemyError:
            logger.exception("Error checking admin role for user=%s", user_id)
            return False

    def get_session(self, user_id: str | None, viewing_as_customer: bool = False) -> AdminSession:
        """Build the role state for a signed-in user.

        Only actual admins can view as customer; the flag is dropped for
        everyone else.
        """
        is_actual_admin = self.is_actual_admin(user_id)
        return AdminSession(
            user_id=user_id,
            is_actual_admin=is_actual_admin,
            is_viewing_as_customer=viewing_as_customer and is_actual_admin,
        )

    def grant_admin(self, user_id: str) -> UserRole:
        role = self.role_repo.add(user_id, AppRole.ADMIN)
        logger.info("Admin role granted to user=%s", user_id)
        return role

    def revoke_admin(self, user_id: str) -> bool:
        removed = self.role_repo.remove(user_id, AppRole.ADMIN)
        if removed:
            logger.info("Admin role revoked from user=%s", user_id)
        return removed

    def list_admins(self) -> list[UserRole]:
        return self.role_repo.list_by_role(AppRole.ADMIN)
