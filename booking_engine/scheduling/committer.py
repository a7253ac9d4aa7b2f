"""
Booking Committer

The authoritative write path for appointments. Availability listings and
employee assignment both work from snapshots that may be stale by the time a
booking is submitted, so every commit:

1. takes the per-employee/day write lock (EmployeeDayLock row),
2. returns the earlier appointment if the idempotency key is already used,
3. re-checks schedule coverage and conflicts against current data,
4. inserts exactly one appointment,

all inside one transaction. Any failure rolls the transaction back, leaving
neither an appointment nor a customer created for it.
"""
import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Callable, Optional
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from booking_engine.errors import (
    BookingError,
    NoAvailabilityError,
    PersistenceError,
    SlotConflictError,
)
from booking_engine.models import (
    Appointment,
    AppointmentStatus,
    Customer,
    EmployeeDayLock,
    PaymentMethod,
    PaymentStatus,
)
from booking_engine.scheduling.calendar import load_employee_days

logger = logging.getLogger(__name__)


@dataclass
class NewAppointment:
    """Everything needed to write one appointment"""

    company_id: int
    service_id: int
    employee_id: int
    date: date
    start_time: time
    end_time: time
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    customer_id: Optional[int] = None
    notes: Optional[str] = None
    payment_method: str = PaymentMethod.ON_SITE.value
    payment_status: str = PaymentStatus.PENDING.value
    idempotency_key: Optional[str] = None


def find_by_idempotency_key(db: Session, company_id: int, key: Optional[str]) -> Optional[Appointment]:
    """Appointment already created in the company under this idempotency key"""
    if not key:
        return None
    return (
        db.query(Appointment)
        .filter(Appointment.company_id == company_id, Appointment.idempotency_key == key)
        .first()
    )


class BookingCommitter:
    """Transaction-scoped, conflict-checked appointment creation"""

    def __init__(self, db: Session):
        self.db = db

    def _lock_employee_day(self, employee_id: int, day: date) -> None:
        """
        Write the employee/day ledger row, blocking concurrent commits for the
        same calendar until this transaction ends.
        """
        bump = (
            update(EmployeeDayLock)
            .where(EmployeeDayLock.employee_id == employee_id, EmployeeDayLock.date == day)
            .values(version=EmployeeDayLock.version + 1)
            .execution_options(synchronize_session=False)
        )
        if self.db.execute(bump).rowcount:
            return

        try:
            with self.db.begin_nested():
                self.db.add(EmployeeDayLock(employee_id=employee_id, date=day, version=1))
        except IntegrityError:
            # Another transaction created the row first; wait on it instead
            self.db.execute(bump)

    def _revalidate(self, new: NewAppointment) -> None:
        day = load_employee_days(self.db, [new.employee_id], new.date)[new.employee_id]

        if day.covering_window(new.start_time, new.end_time) is None:
            raise NoAvailabilityError(
                f"Employee {new.employee_id} is not scheduled for "
                f"{new.start_time.strftime('%H:%M')}-{new.end_time.strftime('%H:%M')} on {new.date}"
            )

        conflicts = day.conflicts(new.start_time, new.end_time)
        if conflicts:
            logger.info(
                "Slot conflict for employee %s on %s %s-%s (%d existing)",
                new.employee_id, new.date, new.start_time, new.end_time, len(conflicts),
            )
            raise SlotConflictError(
                f"The slot {new.start_time.strftime('%H:%M')} on {new.date} was just taken. "
                "Please choose another time."
            )

    def commit(
        self,
        new: NewAppointment,
        resolve_customer: Optional[Callable[[], Customer]] = None,
    ) -> Appointment:
        """
        Create the appointment if its slot is still free.

        Args:
            new: appointment to write
            resolve_customer: called inside the transaction, after the lock,
                to attach the customer; its writes share the booking's fate

        Returns:
            The new appointment, or the earlier one when the idempotency key
            was already used

        Raises:
            SlotConflictError: the employee already has an overlapping appointment
            NoAvailabilityError: the employee is no longer scheduled for the slot
            PersistenceError: on store failures
        """
        db = self.db
        try:
            self._lock_employee_day(new.employee_id, new.date)

            # A retry may have queued on the lock behind its own original
            existing = find_by_idempotency_key(db, new.company_id, new.idempotency_key)
            if existing is not None:
                logger.info("Idempotency key %s already used by appointment %s", new.idempotency_key, existing.id)
                db.rollback()
                return existing

            self._revalidate(new)

            if resolve_customer is not None:
                new.customer_id = resolve_customer().id

            appointment = Appointment(
                company_id=new.company_id,
                service_id=new.service_id,
                employee_id=new.employee_id,
                customer_id=new.customer_id,
                customer_name=new.customer_name,
                customer_email=new.customer_email,
                customer_phone=new.customer_phone,
                date=new.date,
                start_time=new.start_time,
                end_time=new.end_time,
                status=AppointmentStatus.BOOKED.value,
                payment_status=new.payment_status,
                payment_method=new.payment_method,
                notes=new.notes,
                idempotency_key=new.idempotency_key,
            )
            db.add(appointment)
            db.flush()
            db.commit()
        except BookingError:
            db.rollback()
            raise
        except IntegrityError as e:
            db.rollback()
            existing = find_by_idempotency_key(db, new.company_id, new.idempotency_key)
            if existing is not None:
                logger.info("Idempotency key %s already used by appointment %s", new.idempotency_key, existing.id)
                return existing
            logger.exception("Appointment insert violated a constraint")
            raise PersistenceError(f"Error creating appointment: {str(e)}")
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Appointment commit failed")
            raise PersistenceError(f"Error creating appointment: {str(e)}")

        db.refresh(appointment)
        logger.info(
            "Booked appointment %s: employee %s on %s %s-%s",
            appointment.id, appointment.employee_id, appointment.date,
            appointment.start_time, appointment.end_time,
        )
        return appointment
