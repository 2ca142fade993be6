from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping

from packdash.models.admin import AppRole, UserRole
from packdash.repositories.base import RoleRepository


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SQLAlchemyRoleRepository(RoleRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_role(row: RowMapping) -> UserRole:
        return UserRole(
            id=row["id"],
            user_id=row["user_id"],
            role=AppRole(row["role"]),
            created_at=row["created_at"],
        )

    def _get(self, user_id: str, role: AppRole) -> UserRole | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM user_roles WHERE user_id = :user_id AND role = :role"),
                {"user_id": user_id, "role": role.value},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_role(row)

    def has_role(self, user_id: str, role: AppRole) -> bool:
        return self._get(user_id, role) is not None

    def list_by_role(self, role: AppRole) -> list[UserRole]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM user_roles WHERE role = :role ORDER BY created_at, id"),
                {"role": role.value},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_role(row) for row in rows]

    def add(self, user_id: str, role: AppRole) -> UserRole:
        existing = self._get(user_id, role)
        if existing is not None:
            return existing
        self.conn.execute(
            text("INSERT INTO user_roles (user_id, role, created_at) VALUES (:user_id, :role, :created_at)"),
            {"user_id": user_id, "role": role.value, "created_at": _now()},
        )
        self.conn.commit()
        result = self._get(user_id, role)
        if result is None:
            raise RuntimeError(f"Failed to retrieve role after create (user_id={user_id}, role={role.value})")
        return result

    def remove(self, user_id: str, role: AppRole) -> bool:
        result = self.conn.execute(
            text("DELETE FROM user_roles WHERE user_id = :user_id AND role = :role"),
            {"user_id": user_id, "role": role.value},
        )
        self.conn.commit()
        return result.rowcount > 0
