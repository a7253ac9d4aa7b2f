from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship
from booking_engine.database import Base


class Service(Base):
    """Bookable service; its duration drives slot length"""
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    duration_minutes = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), default=0)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=func.now())

    # Relationships
    company = relationship("Company", back_populates="services")
    assignments = relationship("ServiceEmployee", back_populates="service", cascade="all, delete-orphan")


class ServiceEmployee(Base):
    """
    Assignment of an employee to a service.

    priority and created_at give the explicit order in which employees are
    tried when a customer books without a preference.
    """
    __tablename__ = "service_employees"
    __table_args__ = (
        UniqueConstraint("service_id", "employee_id", name="uq_service_employee"),
    )

    id = Column(Integer, primary_key=True, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), index=True, nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), index=True, nullable=False)
    priority = Column(Integer, default=0, nullable=False)  # lower goes first
    created_at = Column(DateTime, default=func.now(), nullable=False)

    # Relationships
    service = relationship("Service", back_populates="assignments")
    employee = relationship("Employee", back_populates="assignments")
