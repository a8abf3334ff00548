"""Employee roster API routes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from points_ledger.database import get_db
from points_ledger.models.employee import Employee
from points_ledger.schemas.employee import EmployeeCreate, EmployeeOut
from points_ledger.services import roster

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(payload: EmployeeCreate, db: Session = Depends(get_db)):
    """Add an employee to a location's roster."""
    employee = Employee(
        location_id=payload.location_id,
        display_name=payload.display_name,
        title=payload.title.value,
        active=payload.active,
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)
    logger.info("Created employee %s (%s, %s)", employee.employee_id, employee.display_name, employee.title)
    return employee


@router.get("/", response_model=list[EmployeeOut])
def list_employees(
    location_id: Optional[str] = Query(None),
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
):
    """List employees, optionally for one location."""
    query = db.query(Employee)
    if location_id:
        query = query.filter(Employee.location_id == location_id)
    if not include_inactive:
        query = query.filter(Employee.active.is_(True))
    return query.order_by(Employee.display_name).all()


@router.get("/awardable", response_model=list[EmployeeOut])
def list_awardable_employees(
    actor_id: str = Query(...),
    location_id: str = Query(...),
    db: Session = Depends(get_db),
):
    """Employees at a location the actor outranks, i.e. valid award targets."""
    return roster.awardable_employees(db, actor_id, location_id)


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(employee_id: str, db: Session = Depends(get_db)):
    """Fetch a single employee by ID."""
    employee = db.query(Employee).filter(Employee.employee_id == employee_id).first()
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee
