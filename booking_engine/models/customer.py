from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from booking_engine.database import Base


class Customer(Base):
    """Customer of a company, unique per (company_id, email)"""
    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("company_id", "email", name="uq_customer_company_email"),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)  # stored lower-cased
    phone = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=func.now())
