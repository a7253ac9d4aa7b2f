from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Time,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship
from booking_engine.database import Base


class Employee(Base):
    """Staff member who can serve appointments"""
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    visible = Column(Boolean, default=True, nullable=False)  # bookable by customers
    created_at = Column(DateTime, default=func.now())

    # Relationships
    company = relationship("Company", back_populates="employees")
    assignments = relationship("ServiceEmployee", back_populates="employee", cascade="all, delete-orphan")
    schedule_windows = relationship("ScheduleWindow", back_populates="employee", cascade="all, delete-orphan")


class ScheduleWindow(Base):
    """Date range plus daily [start_time, end_time) the employee works"""
    __tablename__ = "schedule_windows"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), index=True, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)  # inclusive
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    created_at = Column(DateTime, default=func.now())

    # Relationships
    employee = relationship("Employee", back_populates="schedule_windows")


class EmployeeDayLock(Base):
    """
    Ledger row serializing calendar writes for one employee on one date.

    BookingCommitter writes this row before re-checking conflicts, so two
    commits for the same employee/date cannot interleave.
    """
    __tablename__ = "employee_day_locks"
    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_employee_day_lock"),
    )

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    date = Column(Date, nullable=False)
    version = Column(Integer, default=0, nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
