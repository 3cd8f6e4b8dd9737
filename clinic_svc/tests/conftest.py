"""
Shared pytest fixtures for service and API tests.

Key patterns:

1. Database Isolation: Each test gets a fresh temporary database
2. DI Override: Use app.dependency_overrides to inject test dependencies
3. Service Injection: Services are created with test repositories

Fixture Hierarchy:
    temp_db → repositories → services → test_app → client
"""
import os
import tempfile
from datetime import date

import pytest
from fastapi.testclient import TestClient

from core import dependencies as deps
from repositories import Database, ExamRepository, PatientRepository
from schemas import ExamCreate, PatientCreate
from services import ExamService, PatientService

MARIA = {
    "nome": "Maria Silva",
    "dataDeNascimento": "1990-01-15",
    "cartaoCidadao": "12345678",
    "telefone": "912345678",
    "email": "maria@email.com",
}


@pytest.fixture
def temp_db():
    """
    Create a temporary database for testing.

    A fresh SQLite file per test keeps tests fully isolated.
    """
    fd, db_path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    db = Database(db_path=db_path)
    yield db

    for suffix in ("", "-wal", "-shm"):
        if os.path.exists(db_path + suffix):
            os.unlink(db_path + suffix)


@pytest.fixture
def patient_repo(temp_db):
    """Create a PatientRepository with the test database."""
    return PatientRepository(db=temp_db)


@pytest.fixture
def exam_repo(temp_db):
    """Create an ExamRepository with the test database."""
    return ExamRepository(db=temp_db)


@pytest.fixture
def patient_service(patient_repo):
    """Create a PatientService with the test repository."""
    return PatientService(patient_repository=patient_repo)


@pytest.fixture
def exam_service(exam_repo, patient_repo):
    """Create an ExamService with the test repositories."""
    return ExamService(exam_repository=exam_repo, patient_repository=patient_repo)


@pytest.fixture
def make_patient(patient_service):
    """
    Factory creating patients through the service.

    Each call gets a distinct civil ID unless one is given.
    """
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Paciente {counter['n']}",
            "birth_date": date(1980, 1, counter["n"] % 28 + 1),
            "civil_id": f"{10000000 + counter['n']}",
            "phone": "912345678",
            "email": None,
        }
        data.update(overrides)
        return patient_service.create_patient(PatientCreate(**data))

    return _make


@pytest.fixture
def make_exam(exam_service):
    """Factory creating exams through the service."""
    counter = {"n": 0}

    def _make(patient_id, **overrides):
        counter["n"] += 1
        data = {
            "name": f"Exame {counter['n']}",
            "description": "Análise de rotina",
            "price": 10.0 * counter["n"],
            "patient_id": patient_id,
        }
        data.update(overrides)
        return exam_service.create_exam(ExamCreate(**data))

    return _make


@pytest.fixture
def test_app(temp_db, patient_repo, exam_repo, patient_service, exam_service):
    """
    Create the real application with dependency overrides.

    - Uses the real routers, middleware and exception handlers
    - Injects the test database and services via dependency_overrides
    """
    from main import create_app

    app = create_app(database=temp_db)

    app.dependency_overrides[deps.get_database] = lambda: temp_db
    app.dependency_overrides[deps.get_patient_repository] = lambda: patient_repo
    app.dependency_overrides[deps.get_exam_repository] = lambda: exam_repo
    app.dependency_overrides[deps.get_patient_service] = lambda: patient_service
    app.dependency_overrides[deps.get_exam_service] = lambda: exam_service

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client for the API."""
    return TestClient(test_app)


@pytest.fixture
def maria(client):
    """Maria Silva, created through the API."""
    response = client.post("/patients", json=MARIA)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def exam_added_during_delete(temp_db):
    """
    Trigger that registers a new exam for a patient while that patient's
    exams are being deleted, as a concurrent POST /exams would.

    Fires when the exam named "Hemograma" is removed.
    """
    conn = temp_db.get_connection()
    try:
        conn.execute("""
            CREATE TRIGGER exam_added_during_delete AFTER DELETE ON exams
            WHEN OLD.name = 'Hemograma'
            BEGIN
                INSERT INTO exams (name, description, price, patient_id)
                VALUES ('Raio X', 'Tórax', 20.0, OLD.patient_id);
            END
        """)
        conn.commit()
    finally:
        conn.close()
