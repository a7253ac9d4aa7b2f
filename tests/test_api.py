"""
Integration tests for API endpoints
"""
from datetime import time
import pytest
from fastapi.testclient import TestClient
from booking_engine.database import get_db
from booking_engine.main import app
from booking_engine.models import Appointment


@pytest.fixture
def client(session_factory):
    """Create test client bound to the test database"""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def booking_payload(service, booking_day):
    return {
        "service_id": service.id,
        "date": booking_day.isoformat(),
        "start_time": "10:00",
        "customer_name": "Jan Kowalski",
        "customer_email": "jan@example.com",
        "customer_phone": "+48123456789",
    }


class TestHealthEndpoint:
    """Test health check endpoint"""

    def test_health_check(self, client):
        """Test health check returns OK"""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_root_endpoint(self, client):
        """Test root endpoint"""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert "message" in data
        assert "docs" in data
        assert "health" in data


class TestSlotsEndpoint:
    """Test available slots endpoint"""

    def test_list_slots(self, client, company, service, booking_day, make_employee, make_appointment):
        anna = make_employee("Anna")
        make_appointment(anna, booking_day, time(10, 0), time(10, 30))

        response = client.get(
            f"/companies/{company.id}/services/{service.id}/slots",
            params={"date": booking_day.isoformat()},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["service_id"] == service.id
        assert data["slots"][0] == "09:00"
        assert data["slots"][-1] == "16:30"
        assert "10:00" not in data["slots"]

    def test_invalid_date(self, client, company, service):
        response = client.get(
            f"/companies/{company.id}/services/{service.id}/slots",
            params={"date": "tomorrow"},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_missing_date(self, client, company, service):
        response = client.get(f"/companies/{company.id}/services/{service.id}/slots")

        assert response.status_code == 422

    def test_unknown_service(self, client, company, booking_day):
        response = client.get(
            f"/companies/{company.id}/services/999/slots",
            params={"date": booking_day.isoformat()},
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestBookingsEndpoint:
    """Test booking submission endpoint"""

    def test_create_booking(self, client, company, make_employee, booking_payload):
        anna = make_employee("Anna")

        response = client.post(f"/companies/{company.id}/bookings", json=booking_payload)

        assert response.status_code == 201
        data = response.json()
        assert data["employee_id"] == anna.id
        assert data["status"] == "booked"
        assert data["payment_status"] == "pending"

    def test_missing_fields(self, client, company, booking_payload):
        payload = dict(booking_payload)
        del payload["customer_email"]

        response = client.post(f"/companies/{company.id}/bookings", json=payload)

        assert response.status_code == 422

    def test_slot_taken(self, client, company, make_employee, booking_payload):
        make_employee("Anna")
        client.post(f"/companies/{company.id}/bookings", json=booking_payload)

        payload = dict(booking_payload, customer_email="other@example.com")
        response = client.post(f"/companies/{company.id}/bookings", json=payload)

        assert response.status_code == 409
        assert response.json()["error"] == "no_availability"

    def test_off_grid_time(self, client, company, make_employee, booking_payload):
        make_employee("Anna")
        payload = dict(booking_payload, start_time="10:05")

        response = client.post(f"/companies/{company.id}/bookings", json=payload)

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_idempotency_header(self, client, test_db_session, company, make_employee, booking_payload):
        make_employee("Anna")
        headers = {"Idempotency-Key": "retry-42"}

        first = client.post(f"/companies/{company.id}/bookings", json=booking_payload, headers=headers)
        second = client.post(f"/companies/{company.id}/bookings", json=booking_payload, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 201
        assert first.json()["appointment_id"] == second.json()["appointment_id"]
        assert test_db_session.query(Appointment).count() == 1


class TestAppointmentEndpoints:
    """Test appointment lifecycle endpoints"""

    @pytest.fixture
    def appointment_id(self, client, company, make_employee, booking_payload):
        make_employee("Anna")
        response = client.post(f"/companies/{company.id}/bookings", json=booking_payload)
        return response.json()["appointment_id"]

    def test_get_appointment(self, client, appointment_id):
        response = client.get(f"/appointments/{appointment_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["start_time"] == "10:00"
        assert data["end_time"] == "10:30"
        assert data["customer_email"] == "jan@example.com"
        assert data["payment_method"] == "on_site"

    def test_get_missing_appointment(self, client):
        response = client.get("/appointments/999")

        assert response.status_code == 404

    def test_complete_then_cancel(self, client, appointment_id):
        response = client.post(f"/appointments/{appointment_id}/complete")
        assert response.status_code == 200
        assert response.json()["status"] == "completed"

        response = client.post(f"/appointments/{appointment_id}/cancel")
        assert response.status_code == 409
        assert response.json()["error"] == "invalid_status_transition"

    def test_cancel(self, client, appointment_id):
        response = client.post(f"/appointments/{appointment_id}/cancel")

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_update_payment_status(self, client, appointment_id):
        response = client.put(f"/appointments/{appointment_id}/payment-status", json={"payment_status": "paid"})

        assert response.status_code == 200
        assert response.json()["payment_status"] == "paid"

    def test_invalid_payment_status(self, client, appointment_id):
        response = client.put(f"/appointments/{appointment_id}/payment-status", json={"payment_status": "free"})

        assert response.status_code == 422
