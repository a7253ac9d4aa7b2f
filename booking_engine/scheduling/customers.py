"""
Customer find-or-create
"""
import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from booking_engine.errors import CustomerResolutionError, PersistenceError
from booking_engine.models import Customer

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CustomerResolver:
    """
    Resolve the customer a booking is attributed to, creating it on first use.

    Uniqueness of (company_id, email) is enforced by the store. The insert runs
    in a savepoint so that losing a concurrent first-time insert only rolls
    back the savepoint, after which the winner's row is re-selected.

    The resolver flushes but never commits: the enclosing booking transaction
    decides whether a newly created customer is kept.
    """

    def __init__(self, db: Session):
        self.db = db

    def _find(self, company_id: int, email: str) -> Optional[Customer]:
        return (
            self.db.query(Customer)
            .filter(Customer.company_id == company_id, Customer.email == email)
            .first()
        )

    def resolve(self, company_id: int, email: str, name: str, phone: Optional[str] = None) -> Customer:
        """
        Return the customer for (company_id, email), created if absent.

        Existing customers are returned unchanged; name and phone are only
        used when creating.

        Raises:
            CustomerResolutionError: if the insert failed and no customer can be found
            PersistenceError: on other store failures
        """
        email = normalize_email(email)
        try:
            customer = self._find(company_id, email)
            if customer is not None:
                return customer

            customer = Customer(company_id=company_id, email=email, name=name.strip(), phone=phone or None)
            try:
                with self.db.begin_nested():
                    self.db.add(customer)
            except IntegrityError:
                logger.info("Customer %s for company %s created concurrently, reselecting", email, company_id)
                existing = self._find(company_id, email)
                if existing is None:
                    raise CustomerResolutionError(f"Could not create or find customer {email}")
                return existing

            logger.info("Created customer %s for company %s", customer.id, company_id)
            return customer
        except SQLAlchemyError as e:
            logger.exception("Customer resolution failed for %s", email)
            raise PersistenceError(f"Customer lookup failed: {str(e)}")
