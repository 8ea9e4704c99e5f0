# backend/routes/employees.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_current_user, admin_required
from utils.audit import write_log, client_ip
from models.users import User
from models.employee import Employee
from models.transaction import OutgoingTransaction
from schemas.employee import EmployeeCreate, EmployeeUpdate, EmployeeOut

router = APIRouter(prefix="/api/employees", tags=["Employees"])


def _get_or_404(db: Session, employee_id: int) -> Employee:
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee

def _ensure_unique(db: Session, name: str, phone: str, exclude_id: Optional[int] = None) -> None:
    q = db.query(Employee).filter(Employee.employee_name == name, Employee.phone_number == phone)
    if exclude_id is not None:
        q = q.filter(Employee.id != exclude_id)
    if q.first():
        raise HTTPException(status_code=400, detail="Employee with this name and phone number already exists")


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(
    payload: EmployeeCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    _ensure_unique(db, payload.employee_name, payload.phone_number)

    employee = Employee(
        employee_name=payload.employee_name,
        department=payload.department,
        phone_number=payload.phone_number,
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)

    write_log(db, user_id=current_user.id, action="EMPLOYEE_CREATE", resource="employees",
              resource_id=employee.id, ip=client_ip(request), meta={"employee_name": employee.employee_name})
    return employee


@router.get("", response_model=List[EmployeeOut])
def list_employees(
    department: Optional[str] = Query(None, description="Filter by department"),
    q: Optional[str] = Query(None, description="Search by employee name"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Employee)
    if department:
        query = query.filter(Employee.department == department.strip().upper())
    if q:
        query = query.filter(Employee.employee_name.ilike(f"%{q}%"))
    return query.order_by(Employee.employee_name.asc(), Employee.id.asc()).all()


@router.get("/{employee_id}", response_model=EmployeeOut)
def get_employee(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_or_404(db, employee_id)


@router.put("/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    employee = _get_or_404(db, employee_id)

    # Update only the fields provided in the payload
    new_name = payload.employee_name if payload.employee_name is not None else employee.employee_name
    new_phone = payload.phone_number if payload.phone_number is not None else employee.phone_number
    _ensure_unique(db, new_name, new_phone, exclude_id=employee.id)

    employee.employee_name = new_name
    employee.phone_number = new_phone
    if payload.department is not None:
        employee.department = payload.department

    db.commit()
    db.refresh(employee)

    write_log(db, user_id=current_user.id, action="EMPLOYEE_UPDATE", resource="employees",
              resource_id=employee.id, ip=client_ip(request), meta=payload.model_dump(exclude_none=True))
    return employee


# Employees who already received stock stay for the audit trail
@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(
    employee_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    employee = _get_or_404(db, employee_id)
    referenced = db.query(OutgoingTransaction.id).filter(OutgoingTransaction.employee_id == employee.id).first()
    if referenced:
        raise HTTPException(status_code=409, detail="Employee has outgoing transactions and cannot be deleted")

    db.delete(employee)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Employee has outgoing transactions and cannot be deleted")

    write_log(db, user_id=current_user.id, action="EMPLOYEE_DELETE", resource="employees",
              resource_id=employee_id, ip=client_ip(request))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
