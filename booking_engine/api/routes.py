from datetime import date as Date
from typing import List, Optional
from fastapi import APIRouter, Depends, Header, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from booking_engine.config import settings
from booking_engine.database import get_db
from booking_engine.models import Appointment
from booking_engine.scheduling import (
    cancel_appointment,
    complete_appointment,
    get_appointment,
    list_available_slots,
    submit_booking,
    update_payment_status,
)
from booking_engine.scheduling.timeutils import format_time

router = APIRouter()


class SlotsResponse(BaseModel):
    """Response model for the available slots endpoint"""

    date: str
    service_id: int
    slots: List[str]


class BookingRequest(BaseModel):
    """Request model for /bookings endpoint"""

    service_id: int
    date: str
    start_time: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    preferred_employee_id: Optional[int] = None
    notes: Optional[str] = None
    payment_method: Optional[str] = None
    idempotency_key: Optional[str] = Field(default=None, max_length=255)


class BookingResponse(BaseModel):
    """Response model for /bookings endpoint"""

    appointment_id: int
    employee_id: int
    status: str
    payment_status: str


class PaymentStatusRequest(BaseModel):
    payment_status: str


class AppointmentResponse(BaseModel):
    id: int
    company_id: int
    service_id: int
    employee_id: Optional[int]
    customer_id: Optional[int]
    customer_name: str
    customer_email: str
    customer_phone: Optional[str]
    date: Date
    start_time: str
    end_time: str
    status: str
    payment_status: str
    payment_method: str
    notes: Optional[str]

    @classmethod
    def from_model(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            company_id=appointment.company_id,
            service_id=appointment.service_id,
            employee_id=appointment.employee_id,
            customer_id=appointment.customer_id,
            customer_name=appointment.customer_name,
            customer_email=appointment.customer_email,
            customer_phone=appointment.customer_phone,
            date=appointment.date,
            start_time=format_time(appointment.start_time),
            end_time=format_time(appointment.end_time),
            status=appointment.status,
            payment_status=appointment.payment_status,
            payment_method=appointment.payment_method,
            notes=appointment.notes,
        )


@router.get("/companies/{company_id}/services/{service_id}/slots", response_model=SlotsResponse)
def get_available_slots(
    company_id: int,
    service_id: int,
    date: str = Query(..., description="Date in format YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    """
    List bookable slot start times for a service on a date.

    Advisory only; a slot can be taken before it is booked.
    """
    slots = list_available_slots(db, company_id, service_id, date)
    return SlotsResponse(date=date, service_id=service_id, slots=[format_time(slot) for slot in slots])


@router.post("/companies/{company_id}/bookings", response_model=BookingResponse, status_code=201)
def create_booking(
    company_id: int,
    request: BookingRequest,
    idempotency_key: Optional[str] = Header(default=None, alias="Idempotency-Key"),
    db: Session = Depends(get_db),
):
    """
    Book a service.

    - Assign an employee if none was requested
    - Find or create the customer
    - Commit the appointment after re-checking the slot
    """
    result = submit_booking(
        db,
        company_id=company_id,
        service_id=request.service_id,
        day=request.date,
        start_time=request.start_time,
        customer_name=request.customer_name,
        customer_email=request.customer_email,
        preferred_employee_id=request.preferred_employee_id,
        customer_phone=request.customer_phone,
        notes=request.notes,
        payment_method=request.payment_method,
        idempotency_key=request.idempotency_key or idempotency_key,
    )
    return BookingResponse(
        appointment_id=result.appointment_id,
        employee_id=result.employee_id,
        status=result.status,
        payment_status=result.payment_status,
    )


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
def read_appointment(appointment_id: int, db: Session = Depends(get_db)):
    """Get a single appointment"""
    return AppointmentResponse.from_model(get_appointment(db, appointment_id))


@router.post("/appointments/{appointment_id}/complete", response_model=AppointmentResponse)
def complete(appointment_id: int, db: Session = Depends(get_db)):
    """Mark a booked appointment as completed"""
    return AppointmentResponse.from_model(complete_appointment(db, appointment_id))


@router.post("/appointments/{appointment_id}/cancel", response_model=AppointmentResponse)
def cancel(appointment_id: int, db: Session = Depends(get_db)):
    """Cancel a booked appointment"""
    return AppointmentResponse.from_model(cancel_appointment(db, appointment_id))


@router.put("/appointments/{appointment_id}/payment-status", response_model=AppointmentResponse)
def set_payment_status(appointment_id: int, request: PaymentStatusRequest, db: Session = Depends(get_db)):
    """Record a payment status change"""
    return AppointmentResponse.from_model(update_payment_status(db, appointment_id, request.payment_status))


@router.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "ok", "app": settings.app_name}
