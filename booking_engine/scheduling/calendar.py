"""
Calendar Snapshot

Loads what the scheduling decisions need to know about a set of employees on
one date (their covering schedule windows and their non-cancelled
appointments) into plain in-memory values. Availability and assignment work
on these snapshots and never touch the session themselves.
"""
from dataclasses import dataclass, field
from datetime import date, time
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session
from booking_engine.models import (
    Appointment,
    AppointmentStatus,
    Employee,
    ScheduleWindow,
    Service,
    ServiceEmployee,
)
from booking_engine.scheduling.overlap import find_overlapping

Interval = Tuple[time, time]


@dataclass
class EmployeeDay:
    """One employee's working windows and busy intervals on a date"""

    employee_id: int
    windows: List[Interval] = field(default_factory=list)
    busy: List[Interval] = field(default_factory=list)

    def covering_window(self, start: time, end: time) -> Optional[Interval]:
        """
        First window that fully contains [start, end).

        Windows are independent: a slot may not straddle two adjacent windows.
        """
        for window_start, window_end in self.windows:
            if start >= window_start and end <= window_end:
                return (window_start, window_end)
        return None

    def conflicts(self, start: time, end: time) -> List[Interval]:
        return find_overlapping(start, end, self.busy)

    def is_free(self, start: time, end: time) -> bool:
        return self.covering_window(start, end) is not None and not self.conflicts(start, end)


def eligible_employee_ids(db: Session, service: Service) -> List[int]:
    """
    Employees who may serve a service, in assignment order.

    Only visible employees of the service's company qualify. The order is
    priority, then assignment time, then employee id, so it never depends
    on how the store happens to return rows.
    """
    rows = (
        db.query(ServiceEmployee.employee_id)
        .join(Employee, Employee.id == ServiceEmployee.employee_id)
        .filter(
            ServiceEmployee.service_id == service.id,
            Employee.company_id == service.company_id,
            Employee.visible.is_(True),
        )
        .order_by(
            ServiceEmployee.priority.asc(),
            ServiceEmployee.created_at.asc(),
            ServiceEmployee.employee_id.asc(),
        )
        .all()
    )
    return [row.employee_id for row in rows]


def covering_windows(db: Session, employee_ids: Iterable[int], day: date) -> List[ScheduleWindow]:
    employee_ids = list(employee_ids)
    if not employee_ids:
        return []
    return (
        db.query(ScheduleWindow)
        .filter(
            ScheduleWindow.employee_id.in_(employee_ids),
            ScheduleWindow.start_date <= day,
            ScheduleWindow.end_date >= day,
        )
        .order_by(ScheduleWindow.start_time, ScheduleWindow.id)
        .all()
    )


def active_appointments(db: Session, employee_ids: Iterable[int], day: date) -> List[Appointment]:
    """Non-cancelled appointments of the employees on a date"""
    employee_ids = list(employee_ids)
    if not employee_ids:
        return []
    return (
        db.query(Appointment)
        .filter(
            Appointment.employee_id.in_(employee_ids),
            Appointment.date == day,
            Appointment.status != AppointmentStatus.CANCELLED.value,
        )
        .order_by(Appointment.start_time, Appointment.id)
        .all()
    )


def load_employee_days(db: Session, employee_ids: Iterable[int], day: date) -> Dict[int, EmployeeDay]:
    """Snapshot of every given employee's day, keyed by employee id"""
    employee_ids = list(employee_ids)
    days = {employee_id: EmployeeDay(employee_id=employee_id) for employee_id in employee_ids}

    for window in covering_windows(db, employee_ids, day):
        days[window.employee_id].windows.append((window.start_time, window.end_time))

    for appointment in active_appointments(db, employee_ids, day):
        days[appointment.employee_id].busy.append((appointment.start_time, appointment.end_time))

    return days
