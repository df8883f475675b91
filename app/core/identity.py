"""
Explicit identity context passed into every leave engine operation
"""
from dataclasses import dataclass

from app.models.employee import Department, Role


@dataclass(frozen=True)
class Actor:
    """Who is performing an operation: id, role and home department."""

    id: int
    role: Role
    department: Department

    @classmethod
    def from_employee(cls, employee) -> "Actor":
        return cls(id=employee.id, role=Role(employee.role), department=Department(employee.department))
