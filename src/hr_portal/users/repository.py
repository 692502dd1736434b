from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus, Role
from .model import Compensation, Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, user_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_by_status(self, status: EmployeeStatus) -> Sequence[Employee]:
        raise NotImplementedError

    def list_by_roles(self, roles: Sequence[Role]) -> Sequence[Employee]:
        raise NotImplementedError

    def update_compensation(self, user_id: str, compensation: Compensation) -> bool:
        raise NotImplementedError

    def set_status(self, user_id: str, status: EmployeeStatus) -> bool:
        raise NotImplementedError
