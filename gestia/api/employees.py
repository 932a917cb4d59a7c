"""
Employees API endpoints (admins only)
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List
import uuid

from gestia.core.database import get_session
from gestia.core.dependencies import get_session_context
from gestia.core.session import SessionContext
from gestia.schemas.employee import EmployeeRead
from gestia.services import employees

router = APIRouter()


@router.get("/", response_model=List[EmployeeRead])
async def list_employees(
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    return employees.list_employees(db, context)


@router.post("/", response_model=EmployeeRead, status_code=status.HTTP_201_CREATED)
async def create_employee(
    employee_data: dict,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    return employees.create_employee(db, context, employee_data)


@router.patch("/{employee_id}", response_model=EmployeeRead)
async def update_employee(
    employee_id: uuid.UUID,
    employee_data: dict,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    return employees.update_employee(db, context, employee_id, employee_data)


@router.post("/{employee_id}/toggle-status", response_model=EmployeeRead)
async def toggle_employee_status(
    employee_id: uuid.UUID,
    context: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_session),
):
    """Deactivate or reactivate an employee"""
    return employees.toggle_employee_status(db, context, employee_id)
