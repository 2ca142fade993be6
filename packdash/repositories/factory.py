from packdash.repositories.base import RoleRepository


def get_role_repository() -> RoleRepository:
    from packdash.db import get_connection
    from packdash.repositories.sqlalchemy import SQLAlchemyRoleRepository

    return SQLAlchemyRoleRepository(get_connection())
