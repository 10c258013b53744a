from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import PlanType
from ..core.exceptions import ValidationError
from ..organizations.model import Organization, PlanFeatures
from ..organizations.repository import OrganizationRepository
from ..payroll.model import PayrollPolicy
from .model import Employee, PositionPermissions
from .policy import requires_photo, resolve_payroll_policy, resolve_permissions
from .repository import EmployeeRepository


@dataclass(frozen=True)
class EmployeeContext:
    """Everything a command needs to know about the acting employee."""

    employee: Employee
    organization: Organization
    permissions: PositionPermissions
    payroll_policy: Optional[PayrollPolicy]

    @property
    def features(self) -> PlanFeatures:
        return self.organization.features

    @property
    def photo_policy(self) -> bool:
        return self.features.photo_capture and requires_photo(self.employee, self.permissions)

    @property
    def night_mode_allowed(self) -> bool:
        return self.features.night_shift and self.permissions.can_use_night_shift


class EmployeeDirectory:
    """Use case: resolve an employee together with position and plan settings."""

    def __init__(self, employees: EmployeeRepository, organizations: OrganizationRepository):
        self._employees = employees
        self._organizations = organizations

    def context_for(self, employee_id: str) -> EmployeeContext:
        employee = self._employees.get_by_id(str(employee_id))
        if not employee or not employee.is_active:
            raise ValidationError("Employee not found")

        organization = self.organization(employee.organization_id)

        positions = self._employees.list_positions(employee.organization_id)
        return EmployeeContext(
            employee=employee,
            organization=organization,
            permissions=resolve_permissions(employee, positions),
            payroll_policy=resolve_payroll_policy(employee, positions),
        )

    def organization(self, organization_id: str) -> Organization:
        organization = self._organizations.get_by_id(organization_id)
        if organization is None:
            return Organization(organization_id=organization_id, name="", plan=PlanType.FREE)
        return organization

    def list_employees(self, organization_id: str):
        return self._employees.list_for_organization(organization_id)

    def positions(self, organization_id: str):
        return self._employees.list_positions(organization_id)
