"""
Pytest configuration and fixtures
"""
from datetime import date, time, timedelta
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from booking_engine.database import Base
from booking_engine.models import (
    Appointment,
    Company,
    Employee,
    ScheduleWindow,
    Service,
    ServiceEmployee,
)


@pytest.fixture(scope="function")
def test_engine(tmp_path):
    """
    Create test database engine.

    A file database rather than :memory: so that separate sessions get
    separate connections, as concurrent requests would.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test_booking.db'}",
        connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    """Session factory bound to the test engine"""
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def test_db_session(session_factory):
    """Create test database session"""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def booking_day():
    """A future date, so bookings are never rejected as past"""
    return date.today() + timedelta(days=7)


@pytest.fixture
def company(test_db_session):
    """Create sample company"""
    company = Company(name="Studio Bella", slug="studio-bella")
    test_db_session.add(company)
    test_db_session.commit()
    test_db_session.refresh(company)
    return company


@pytest.fixture
def service(test_db_session, company):
    """Create a 30 minute service"""
    service = Service(
        company_id=company.id,
        name="Haircut",
        duration_minutes=30,
        price=50,
        active=True
    )
    test_db_session.add(service)
    test_db_session.commit()
    test_db_session.refresh(service)
    return service


@pytest.fixture
def make_employee(test_db_session, company, service, booking_day):
    """
    Factory creating an employee assigned to the sample service.

    windows: list of (start_date, end_date, start_time, end_time); defaults to
    09:00-17:00 for a month around booking_day.
    """
    def _make(name, priority=0, visible=True, windows=None, assign=True):
        employee = Employee(company_id=company.id, name=name, visible=visible)
        test_db_session.add(employee)
        test_db_session.flush()

        if windows is None:
            windows = [(booking_day - timedelta(days=30), booking_day + timedelta(days=30), time(9, 0), time(17, 0))]
        for start_date, end_date, start_time, end_time in windows:
            test_db_session.add(ScheduleWindow(
                employee_id=employee.id,
                start_date=start_date,
                end_date=end_date,
                start_time=start_time,
                end_time=end_time,
            ))

        if assign:
            test_db_session.add(ServiceEmployee(
                service_id=service.id,
                employee_id=employee.id,
                priority=priority,
            ))

        test_db_session.commit()
        test_db_session.refresh(employee)
        return employee

    return _make


@pytest.fixture
def make_appointment(test_db_session, company, service):
    """Factory inserting an existing appointment directly"""
    def _make(employee, day, start, end, status="booked"):
        appointment = Appointment(
            company_id=company.id,
            service_id=service.id,
            employee_id=employee.id,
            customer_name="Existing Customer",
            customer_email="existing@example.com",
            date=day,
            start_time=start,
            end_time=end,
            status=status,
        )
        test_db_session.add(appointment)
        test_db_session.commit()
        test_db_session.refresh(appointment)
        return appointment

    return _make


# Test markers
def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Multi-threaded concurrency tests")
