"""
Appointment status and payment status changes.

All status moves go through Appointment.complete() / Appointment.cancel(),
so the allowed transitions live in one place.
"""
import logging
from typing import Callable
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from booking_engine.errors import BookingError, NotFoundError, PersistenceError
from booking_engine.models import Appointment

logger = logging.getLogger(__name__)


def get_appointment(db: Session, appointment_id: int) -> Appointment:
    try:
        appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
    except SQLAlchemyError as e:
        raise PersistenceError(f"Error loading appointment: {str(e)}")
    if not appointment:
        raise NotFoundError(f"Appointment {appointment_id} not found")
    return appointment


def _apply(db: Session, appointment_id: int, action: Callable[[Appointment], None], label: str) -> Appointment:
    try:
        appointment = (
            db.query(Appointment)
            .filter(Appointment.id == appointment_id)
            .with_for_update()
            .first()
        )
        if not appointment:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        action(appointment)
        db.commit()
    except BookingError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to %s appointment %s", label, appointment_id)
        raise PersistenceError(f"Error updating appointment: {str(e)}")

    db.refresh(appointment)
    logger.info("Appointment %s: %s (status=%s, payment=%s)",
                appointment_id, label, appointment.status, appointment.payment_status)
    return appointment


def complete_appointment(db: Session, appointment_id: int) -> Appointment:
    """booked -> completed"""
    return _apply(db, appointment_id, lambda appointment: appointment.complete(), "complete")


def cancel_appointment(db: Session, appointment_id: int) -> Appointment:
    """booked -> cancelled; payment status is not touched"""
    return _apply(db, appointment_id, lambda appointment: appointment.cancel(), "cancel")


def update_payment_status(db: Session, appointment_id: int, payment_status: str) -> Appointment:
    """Record a payment event; independent of the appointment status"""
    return _apply(
        db,
        appointment_id,
        lambda appointment: appointment.set_payment_status(payment_status),
        "update payment status",
    )
