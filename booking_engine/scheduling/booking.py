"""
Booking operations exposed to the API layer: listing available slots and
submitting a booking.
"""
import logging
from dataclasses import dataclass
from datetime import date, time
from typing import List, Optional, Union
from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from booking_engine.config import settings
from booking_engine.errors import (
    NoAvailabilityError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from booking_engine.models import Company, PaymentMethod, PaymentStatus, Service
from booking_engine.scheduling.assignment import pick_employee
from booking_engine.scheduling.availability import AvailabilityCalculator
from booking_engine.scheduling.calendar import eligible_employee_ids, load_employee_days
from booking_engine.scheduling.committer import BookingCommitter, NewAppointment, find_by_idempotency_key
from booking_engine.scheduling.customers import CustomerResolver, normalize_email
from booking_engine.scheduling.hours import resolve_operating_hours
from booking_engine.scheduling.timeutils import add_minutes, format_time, parse_date, parse_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingResult:
    appointment_id: int
    employee_id: int
    status: str
    payment_status: str


def initial_payment_status(payment_method: str) -> str:
    """Payment status a new appointment starts with; payment events move it later"""
    return PaymentStatus.PENDING.value


def _get_company(db: Session, company_id: int) -> Company:
    company = db.query(Company).filter(Company.id == company_id).first()
    if not company:
        raise NotFoundError(f"Company {company_id} not found")
    return company


def _get_bookable_service(db: Session, company: Company, service_id: int) -> Service:
    service = (
        db.query(Service)
        .filter(Service.id == service_id, Service.company_id == company.id)
        .first()
    )
    if not service:
        raise NotFoundError(f"Service {service_id} not found")
    if not service.active:
        raise NotFoundError(f"Service {service_id} is not available for booking")
    return service


def list_available_slots(
    db: Session,
    company_id: int,
    service_id: int,
    day: Union[date, str],
) -> List[time]:
    """
    Slot start times for a service on a date.

    Read-only and advisory: the same slot can be gone by the time it is booked.

    Raises:
        ValidationError: malformed date
        NotFoundError: unknown company or service, or inactive service
        PersistenceError: on store failures
    """
    day = parse_date(day)
    try:
        company = _get_company(db, company_id)
        service = _get_bookable_service(db, company, service_id)

        hours = resolve_operating_hours(db, company, day)
        if hours is None:
            logger.debug("Company %s closed on %s", company_id, day)
            return []

        employee_ids = eligible_employee_ids(db, service)
        days = load_employee_days(db, employee_ids, day)
    except SQLAlchemyError as e:
        logger.exception("Failed to load availability for service %s", service_id)
        raise PersistenceError(f"Error loading availability: {str(e)}")

    return AvailabilityCalculator(hours).available_slots(employee_ids, days, service.duration_minutes)


def _validate_contact(customer_name: Optional[str], customer_email: Optional[str]) -> tuple:
    name = (customer_name or "").strip()
    if not name:
        raise ValidationError("customer_name is required")
    if not customer_email or not customer_email.strip():
        raise ValidationError("customer_email is required")
    try:
        validate_email(customer_email.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid customer_email: {str(e)}")
    return name, normalize_email(customer_email)


def _validate_payment_method(payment_method: Optional[str]) -> str:
    method = payment_method or settings.default_payment_method
    try:
        return PaymentMethod(method).value
    except ValueError:
        allowed = ", ".join(m.value for m in PaymentMethod)
        raise ValidationError(f"Unknown payment method '{method}'. Use one of: {allowed}")


def submit_booking(
    db: Session,
    company_id: int,
    service_id: int,
    day: Union[date, str],
    start_time: Union[time, str],
    customer_name: str,
    customer_email: str,
    preferred_employee_id: Optional[int] = None,
    customer_phone: Optional[str] = None,
    notes: Optional[str] = None,
    payment_method: Optional[str] = None,
    idempotency_key: Optional[str] = None,
) -> BookingResult:
    """
    Book a service: pick the employee, resolve the customer, commit.

    Input format is validated before the store is touched. A resubmission
    carrying an idempotency key that was already used in the company returns
    the original appointment instead of creating a second one.

    Raises:
        ValidationError: malformed input, past date, time off the slot grid,
            or a preferred employee who does not offer the service
        NotFoundError: unknown company or service, or inactive service
        NoAvailabilityError: no eligible employee is free at that time
        SlotConflictError: the slot was taken between assignment and commit
        CustomerResolutionError / PersistenceError: store failures
    """
    day = parse_date(day)
    start = parse_time(start_time, "start_time")
    name, email = _validate_contact(customer_name, customer_email)
    phone = (customer_phone or "").strip() or None
    method = _validate_payment_method(payment_method)
    key = (idempotency_key or "").strip() or None
    if settings.reject_past_dates and day < date.today():
        raise ValidationError("Cannot book in the past. Please choose a future date.")

    try:
        existing = find_by_idempotency_key(db, company_id, key)
        if existing is not None:
            logger.info("Replaying booking for idempotency key %s", key)
            return BookingResult(existing.id, existing.employee_id, existing.status, existing.payment_status)

        company = _get_company(db, company_id)
        service = _get_bookable_service(db, company, service_id)
        duration = service.duration_minutes

        hours = resolve_operating_hours(db, company, day)
        if hours is None:
            raise NoAvailabilityError(f"Bookings are not accepted on {day}")
        if not hours.is_bookable_start(start, duration):
            raise ValidationError(
                f"Start time {format_time(start)} is not an available slot between "
                f"{format_time(hours.open_time)} and {format_time(hours.close_time)} "
                f"every {hours.slot_interval_minutes} minutes"
            )
        end = add_minutes(start, duration)

        candidates = eligible_employee_ids(db, service)
        if preferred_employee_id is not None:
            if preferred_employee_id not in candidates:
                raise ValidationError(f"Employee {preferred_employee_id} does not offer this service")
            candidates = [preferred_employee_id]

        days = load_employee_days(db, candidates, day)
    except SQLAlchemyError as e:
        logger.exception("Failed to prepare booking for service %s", service_id)
        raise PersistenceError(f"Error preparing booking: {str(e)}")

    employee_id = pick_employee(candidates, days, start, end)

    resolver = CustomerResolver(db)
    new = NewAppointment(
        company_id=company.id,
        service_id=service.id,
        employee_id=employee_id,
        date=day,
        start_time=start,
        end_time=end,
        customer_name=name,
        customer_email=email,
        customer_phone=phone,
        notes=(notes or "").strip() or None,
        payment_method=method,
        payment_status=initial_payment_status(method),
        idempotency_key=key,
    )
    appointment = BookingCommitter(db).commit(
        new,
        resolve_customer=lambda: resolver.resolve(company.id, email, name, phone),
    )
    return BookingResult(appointment.id, appointment.employee_id, appointment.status, appointment.payment_status)
