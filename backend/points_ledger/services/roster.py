"""Read-only lookups against the employee roster."""
from typing import Optional

from sqlalchemy.orm import Session

from points_ledger.errors import NotFoundError
from points_ledger.models.employee import Employee
from points_ledger.services import ranks


def get_employee(db: Session, employee_id: str) -> Optional[Employee]:
    # populate_existing: the ledger version must never come from a stale identity map
    return (
        db.query(Employee)
        .populate_existing()
        .filter(Employee.employee_id == employee_id)
        .first()
    )


def get_active_employee(
    db: Session,
    employee_id: str,
    role: str = "Employee",
    location_id: Optional[str] = None,
) -> Employee:
    """Return an active employee, optionally required to belong to ``location_id``."""
    employee = get_employee(db, employee_id) if employee_id else None
    if not employee or not employee.active:
        raise NotFoundError(f"{role} {employee_id} not found or inactive")
    if location_id is not None and employee.location_id != location_id:
        raise NotFoundError(f"{role} {employee_id} not found at location {location_id}")
    return employee


def display_names(db: Session, location_id: str) -> dict[str, str]:
    rows = db.query(Employee.employee_id, Employee.display_name).filter(
        Employee.location_id == location_id
    )
    return {employee_id: name for employee_id, name in rows}


def awardable_employees(db: Session, actor_id: str, location_id: str) -> list[Employee]:
    """Active employees at ``location_id`` ranked strictly below the actor, by name."""
    actor = get_active_employee(db, actor_id, role="Actor")
    titles = [title.value for title in ranks.awardable_titles(actor.title)]
    if not titles:
        return []
    return (
        db.query(Employee)
        .filter(
            Employee.location_id == location_id,
            Employee.active.is_(True),
            Employee.title.in_(titles),
        )
        .order_by(Employee.display_name)
        .all()
    )
