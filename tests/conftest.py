import asyncio
import os
import tempfile

from cryptography.fernet import Fernet

# Settings are read at import time, so the environment is prepared first
_db_dir = tempfile.mkdtemp(prefix="yoga-therapy-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_db_dir}/test.db"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["ENCRYPTION_KEY"] = Fernet.generate_key().decode()
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from yoga_therapy.database import Base, engine, async_session  # noqa: E402
from yoga_therapy.main import app  # noqa: E402
from yoga_therapy.models.user import User  # noqa: E402
from yoga_therapy.services.auth_service import hash_password  # noqa: E402

PASSWORD = "secret123"


async def _reset_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def client():
    run(_reset_db())
    with TestClient(app) as c:
        yield c


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, email, role, name="Test User", **extra):
    body = {
        "email": email,
        "password": PASSWORD,
        "confirmPassword": PASSWORD,
        "name": name,
        "role": role,
        **extra,
    }
    response = client.post("/api/auth/register", json=body)
    assert response.status_code == 200, response.text
    data = response.json()
    return {"token": data["token"], "user": data["user"], "headers": auth(data["token"])}


def create_series(client, headers, posture_ids, durations=None, name="Serie de prueba", therapy_type_id=None):
    if therapy_type_id is None:
        therapy_type_id = client.get("/api/therapy-types", headers=headers).json()[0]["id"]
    response = client.post(
        "/api/series",
        headers=headers,
        json={
            "name": name,
            "therapyTypeId": therapy_type_id,
            "postureIds": posture_ids,
            "postureDurations": durations or [],
            "recommendedSessions": 12,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def insert_patient_user(email: str) -> str:
    """A patient-role user without a patient profile."""
    async def _insert():
        async with async_session() as db:
            user = User(email=email, password_hash=hash_password(PASSWORD), name="Sin Perfil", role="patient")
            db.add(user)
            await db.commit()
            return user.id
    return run(_insert())


@pytest.fixture
def instructor(client):
    return register(client, "instructor@example.com", "instructor", name="Ana Instructora")


@pytest.fixture
def other_instructor(client, instructor):
    return register(client, "other@example.com", "instructor", name="Otro Instructor")


@pytest.fixture
def patient(client, instructor):
    account = register(
        client,
        "patient@example.com",
        "patient",
        name="Pablo Paciente",
        instructorId=instructor["user"]["id"],
    )
    patients = client.get("/api/patients", headers=instructor["headers"]).json()
    account["patient_id"] = next(p["id"] for p in patients if p["userId"] == account["user"]["id"])
    return account


@pytest.fixture
def posture_ids(client, instructor):
    postures = client.get("/api/postures", headers=instructor["headers"]).json()
    return [p["id"] for p in postures]


@pytest.fixture
def six_postures(posture_ids):
    # the seeded catalog has four postures; a series may repeat them
    return (posture_ids * 2)[:6]
