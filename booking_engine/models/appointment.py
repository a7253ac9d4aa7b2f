import enum
from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship
from booking_engine.database import Base
from booking_engine.errors import InvalidStatusTransitionError, ValidationError


class AppointmentStatus(str, enum.Enum):
    BOOKED = "booked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


class PaymentMethod(str, enum.Enum):
    ON_SITE = "on_site"
    ONLINE = "online"
    DEPOSIT = "deposit"


# Only booked appointments move; completed and cancelled are terminal
ALLOWED_STATUS_TRANSITIONS = {
    AppointmentStatus.BOOKED: {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED},
    AppointmentStatus.COMPLETED: set(),
    AppointmentStatus.CANCELLED: set(),
}


class Appointment(Base):
    """Booked appointment of a service with one employee"""
    __tablename__ = "appointments"
    __table_args__ = (
        UniqueConstraint("company_id", "idempotency_key", name="uq_appointment_idempotency_key"),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), index=True, nullable=False)
    service_id = Column(Integer, ForeignKey("services.id"), index=True, nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), index=True, nullable=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), index=True, nullable=True)

    # Contact details as entered at booking time
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(20), nullable=True)

    date = Column(Date, index=True, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    status = Column(String(20), default=AppointmentStatus.BOOKED.value, nullable=False)
    payment_status = Column(String(20), default=PaymentStatus.PENDING.value, nullable=False)
    payment_method = Column(String(20), default=PaymentMethod.ON_SITE.value, nullable=False)
    notes = Column(Text, nullable=True)
    idempotency_key = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # Relationships
    service = relationship("Service")
    employee = relationship("Employee")
    customer = relationship("Customer")

    def _transition(self, target: AppointmentStatus) -> None:
        current = AppointmentStatus(self.status)
        if target not in ALLOWED_STATUS_TRANSITIONS[current]:
            raise InvalidStatusTransitionError(
                f"Cannot change appointment {self.id} from {current.value} to {target.value}"
            )
        self.status = target.value

    def complete(self) -> None:
        """Mark a booked appointment as completed"""
        self._transition(AppointmentStatus.COMPLETED)

    def cancel(self) -> None:
        """
        Cancel a booked appointment.

        payment_status is left untouched; refunds are driven by payment events.
        """
        self._transition(AppointmentStatus.CANCELLED)

    def set_payment_status(self, payment_status: str) -> None:
        try:
            self.payment_status = PaymentStatus(payment_status).value
        except ValueError:
            raise ValidationError(f"Unknown payment status '{payment_status}'")

    @property
    def is_active(self) -> bool:
        return self.status != AppointmentStatus.CANCELLED.value
