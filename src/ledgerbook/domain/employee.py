"""Employee and payroll entry domain service."""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerbook.domain.entities import (
    Employee,
    EmployeeStatus,
    PayrollEntry,
    PayrollEntryKind,
    Snapshot,
)
from ledgerbook.domain.errors import NotFoundError, ValidationError, employee_not_found
from ledgerbook.domain.ledger import new_id, require_positive_amount


class EmployeeService:
    """Service for managing employees and their payroll entries."""

    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def add_employee(
        self,
        name: str,
        position: str,
        admission_date: date,
        salary: Decimal,
    ) -> tuple[Snapshot, Employee]:
        """Add an active employee.

        Returns:
            Tuple of (new snapshot, created employee)

        Raises:
            ValidationError: If the name is empty or salary is not positive
        """
        if not name.strip():
            raise ValidationError("Employee name cannot be empty")
        require_positive_amount(salary)

        employee = Employee(
            id=new_id("emp"),
            name=name.strip(),
            position=position,
            admission_date=admission_date,
            salary=salary,
        )
        return (
            replace(self.snapshot, employees=self.snapshot.employees + (employee,)),
            employee,
        )

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        for emp in self.snapshot.employees:
            if emp.id == employee_id:
                return emp
        return None

    def require_employee(self, employee_id: str) -> Employee:
        employee = self.get_employee(employee_id)
        if employee is None:
            raise NotFoundError(employee_not_found(employee_id))
        return employee

    def update_employee(self, employee: Employee) -> Snapshot:
        """Replace an employee record.

        Raises:
            NotFoundError: If the employee does not exist
        """
        self.require_employee(employee.id)
        require_positive_amount(employee.salary)
        return replace(
            self.snapshot,
            employees=tuple(
                employee if e.id == employee.id else e for e in self.snapshot.employees
            ),
        )

    def toggle_status(self, employee_id: str) -> Snapshot:
        """Switch an employee between active and inactive.

        Employees are never deleted so past payroll entries keep their owner.
        """
        employee = self.require_employee(employee_id)
        status = (
            EmployeeStatus.INACTIVE if employee.is_active else EmployeeStatus.ACTIVE
        )
        return self.update_employee(replace(employee, status=status))

    def list_employees(self, active_only: bool = False) -> list[Employee]:
        return [e for e in self.snapshot.employees if e.is_active or not active_only]

    def add_entry(
        self,
        employee_id: str,
        description: str,
        kind: PayrollEntryKind,
        amount: Decimal,
        month: int,
        year: int,
    ) -> tuple[Snapshot, PayrollEntry]:
        """Record an earning or deduction for an employee.

        Raises:
            NotFoundError: If the employee does not exist
            ValidationError: If amount or month is invalid
        """
        employee = self.require_employee(employee_id)
        require_positive_amount(amount)
        if not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}")

        entry = PayrollEntry(
            id=new_id("pe"),
            employee_id=employee.id,
            employee_name=employee.name,
            description=description,
            kind=kind,
            amount=amount,
            month=month,
            year=year,
        )
        return (
            replace(
                self.snapshot,
                payroll_entries=self.snapshot.payroll_entries + (entry,),
            ),
            entry,
        )

    def update_entry(self, entry: PayrollEntry) -> Snapshot:
        """Replace a payroll entry.

        Raises:
            NotFoundError: If the entry does not exist
        """
        if not any(e.id == entry.id for e in self.snapshot.payroll_entries):
            raise NotFoundError(f"Payroll entry {entry.id} not found")
        require_positive_amount(entry.amount)
        return replace(
            self.snapshot,
            payroll_entries=tuple(
                entry if e.id == entry.id else e for e in self.snapshot.payroll_entries
            ),
        )

    def delete_entry(self, entry_id: str) -> Snapshot:
        """Delete a payroll entry.

        Raises:
            NotFoundError: If the entry does not exist
        """
        kept = tuple(e for e in self.snapshot.payroll_entries if e.id != entry_id)
        if len(kept) == len(self.snapshot.payroll_entries):
            raise NotFoundError(f"Payroll entry {entry_id} not found")
        return replace(self.snapshot, payroll_entries=kept)

    def list_entries(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
        employee_id: Optional[str] = None,
    ) -> list[PayrollEntry]:
        return [
            e
            for e in self.snapshot.payroll_entries
            if (month is None or e.month == month)
            and (year is None or e.year == year)
            and (employee_id is None or e.employee_id == employee_id)
        ]
