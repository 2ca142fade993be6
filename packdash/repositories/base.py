from abc import ABC, abstractmethod

from packdash.models.admin import AppRole, UserRole


class RoleRepository(ABC):
    @abstractmethod
    def has_role(self, user_id: str, role: AppRole) -> bool: ...

    @abstractmethod
    def list_by_role(self, role: AppRole) -> list[UserRole]: ...

    @abstractmethod
    def add(self, user_id: str, role: AppRole) -> UserRole: ...

    @abstractmethod
    def remove(self, user_id: str, role: AppRole) -> bool: ...
