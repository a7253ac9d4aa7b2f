from sqlalchemy import (
    Boolean,
    Column,
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


class Company(Base):
    """Tenant owning services, staff, customers and appointments"""
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True)
    # Operating window defaults; NULL falls back to application settings
    opening_time = Column(Time, nullable=True)
    closing_time = Column(Time, nullable=True)
    slot_interval_minutes = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=func.now())

    # Relationships
    business_hours = relationship("BusinessHours", back_populates="company", cascade="all, delete-orphan")
    services = relationship("Service", back_populates="company")
    employees = relationship("Employee", back_populates="company")


class BusinessHours(Base):
    """Per-weekday opening hours overriding the company default window"""
    __tablename__ = "business_hours"
    __table_args__ = (
        UniqueConstraint("company_id", "day_of_week", name="uq_business_hours_company_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), index=True, nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0 = Monday ... 6 = Sunday
    open_time = Column(Time, nullable=True)
    close_time = Column(Time, nullable=True)
    is_closed = Column(Boolean, default=False, nullable=False)

    # Relationships
    company = relationship("Company", back_populates="business_hours")
