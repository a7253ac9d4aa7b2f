from booking_engine.models.company import Company, BusinessHours
from booking_engine.models.service import Service, ServiceEmployee
from booking_engine.models.employee import Employee, ScheduleWindow, EmployeeDayLock
from booking_engine.models.customer import Customer
from booking_engine.models.appointment import (
    Appointment,
    AppointmentStatus,
    PaymentMethod,
    PaymentStatus,
)

__all__ = [
    "Company",
    "BusinessHours",
    "Service",
    "ServiceEmployee",
    "Employee",
    "ScheduleWindow",
    "EmployeeDayLock",
    "Customer",
    "Appointment",
    "AppointmentStatus",
    "PaymentMethod",
    "PaymentStatus",
]
