import asyncio

import pytest
from conftest import PASSWORD, auth, create_series, insert_patient_user, run
from sqlalchemy import select

from yoga_therapy.database import async_session
from yoga_therapy.models.series import PatientSeries
from yoga_therapy.models.user import User
from yoga_therapy.services.assignment_service import assign_series, record_completed_session


@pytest.fixture
def series(client, instructor, six_postures):
    return create_series(client, instructor["headers"], six_postures, durations=[60, 60, 90, 90, 120, 120])


def assign(client, headers, patient_id, series_id):
    return client.post(f"/api/patients/{patient_id}/assign-series", headers=headers, json={"seriesId": series_id})


def session_body(series_id, **overrides):
    return {
        "seriesId": series_id,
        "preIntensity": "moderate",
        "postIntensity": "none",
        "comments": "Me sentí mejor",
        "duration": 9,
        **overrides,
    }


# ═══ Assignment ═══


def test_assign_series(client, instructor, patient, series):
    response = assign(client, instructor["headers"], patient["patient_id"], series["id"])

    assert response.status_code == 200
    body = response.json()
    assert body["patientId"] == patient["patient_id"]
    assert body["isActive"] is True
    assert body["completedSessions"] == 0
    assert body["series"]["id"] == series["id"]
    assert body["assignedAt"]


def test_reassignment_leaves_one_active_series(client, instructor, patient, series, six_postures):
    replacement = create_series(client, instructor["headers"], six_postures, name="Segunda")
    assign(client, instructor["headers"], patient["patient_id"], series["id"])
    assign(client, instructor["headers"], patient["patient_id"], replacement["id"])

    rows = client.get(f"/api/patients/{patient['patient_id']}/assignments", headers=instructor["headers"]).json()
    assert len(rows) == 2
    active = [r for r in rows if r["isActive"]]
    assert [r["seriesId"] for r in active] == [replacement["id"]]

    mine = client.get("/api/my-series", headers=patient["headers"]).json()
    assert mine["series"]["name"] == "Segunda"


def test_reassigning_the_same_series_restarts_the_count(client, instructor, patient, series):
    assign(client, instructor["headers"], patient["patient_id"], series["id"])
    client.post("/api/sessions", headers=patient["headers"], json=session_body(series["id"]))
    assign(client, instructor["headers"], patient["patient_id"], series["id"])

    mine = client.get("/api/my-series", headers=patient["headers"]).json()
    assert mine["completedSessions"] == 0
    rows = client.get(f"/api/patients/{patient['patient_id']}/assignments", headers=instructor["headers"]).json()
    assert sum(r["isActive"] for r in rows) == 1


def test_assign_to_another_instructors_patient(client, other_instructor, patient, six_postures):
    their_series = create_series(client, other_instructor["headers"], six_postures)
    response = assign(client, other_instructor["headers"], patient["patient_id"], their_series["id"])
    assert response.status_code == 403


def test_assign_another_instructors_series(client, instructor, other_instructor, patient, six_postures):
    their_series = create_series(client, other_instructor["headers"], six_postures)
    response = assign(client, instructor["headers"], patient["patient_id"], their_series["id"])
    assert response.status_code == 403


def test_assign_unknown_patient_or_series(client, instructor, patient, series):
    assert assign(client, instructor["headers"], "missing", series["id"]).status_code == 404
    assert assign(client, instructor["headers"], patient["patient_id"], "missing").status_code == 404


def test_assign_is_instructor_only(client, patient, series):
    response = assign(client, patient["headers"], patient["patient_id"], series["id"])
    assert response.status_code == 403


# ═══ Patient portal ═══


def test_my_series_without_assignment(client, patient):
    response = client.get("/api/my-series", headers=patient["headers"])
    assert response.status_code == 204
    assert response.content == b""


def test_my_series_returns_the_full_series(client, instructor, patient, series):
    assign(client, instructor["headers"], patient["patient_id"], series["id"])

    response = client.get("/api/my-series", headers=patient["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["series"]["postureIds"] == series["postureIds"]
    assert body["series"]["postureDurations"] == [60, 60, 90, 90, 120, 120]
    assert body["series"]["estimatedDuration"] == 9


def test_my_series_is_patient_only(client, instructor):
    response = client.get("/api/my-series", headers=instructor["headers"])
    assert response.status_code == 403


def test_my_series_without_patient_profile(client):
    insert_patient_user("sinperfil@example.com")
    login = client.post("/api/auth/login", json={"email": "sinperfil@example.com", "password": PASSWORD})

    response = client.get("/api/my-series", headers=auth(login.json()["token"]))
    assert response.status_code == 404
    assert response.json()["detail"] == "Patient profile not found"


# ═══ Sessions ═══


def test_create_session_counts_against_active_assignment(client, instructor, patient, series):
    assign(client, instructor["headers"], patient["patient_id"], series["id"])

    response = client.post("/api/sessions", headers=patient["headers"], json=session_body(series["id"]))
    assert response.status_code == 201
    record = response.json()
    assert record["patientId"] == patient["patient_id"]
    assert record["preIntensity"] == "moderate"
    assert record["postIntensity"] == "none"
    assert record["completedAt"]

    mine = client.get("/api/my-series", headers=patient["headers"]).json()
    assert mine["completedSessions"] == 1


def test_session_for_inactive_series_is_not_counted(client, instructor, patient, series, six_postures):
    replacement = create_series(client, instructor["headers"], six_postures, name="Segunda")
    assign(client, instructor["headers"], patient["patient_id"], series["id"])
    assign(client, instructor["headers"], patient["patient_id"], replacement["id"])

    response = client.post("/api/sessions", headers=patient["headers"], json=session_body(series["id"]))
    assert response.status_code == 201
    assert client.get("/api/my-series", headers=patient["headers"]).json()["completedSessions"] == 0


def test_session_requires_comment(client, patient, series):
    response = client.post("/api/sessions", headers=patient["headers"], json=session_body(series["id"], comments="  "))
    assert response.status_code == 400


def test_session_rejects_unknown_intensity(client, patient, series):
    body = session_body(series["id"], postIntensity="extreme")
    assert client.post("/api/sessions", headers=patient["headers"], json=body).status_code == 400


def test_session_for_unknown_series(client, patient):
    response = client.post("/api/sessions", headers=patient["headers"], json=session_body("missing"))
    assert response.status_code == 404


def test_session_is_patient_only(client, instructor, series):
    response = client.post("/api/sessions", headers=instructor["headers"], json=session_body(series["id"]))
    assert response.status_code == 403


def test_session_history(client, instructor, patient, series):
    assign(client, instructor["headers"], patient["patient_id"], series["id"])
    for comment in ("Primera", "Segunda"):
        client.post("/api/sessions", headers=patient["headers"], json=session_body(series["id"], comments=comment))

    mine = client.get("/api/my-sessions", headers=patient["headers"]).json()
    assert sorted(s["comments"] for s in mine) == ["Primera", "Segunda"]

    seen_by_instructor = client.get(
        f"/api/patients/{patient['patient_id']}/sessions", headers=instructor["headers"]
    ).json()
    assert {s["id"] for s in seen_by_instructor} == {s["id"] for s in mine}


def test_overlapping_sessions_are_all_counted(client, instructor, patient, series):
    assign(client, instructor["headers"], patient["patient_id"], series["id"])

    async def submit_together():
        async def one():
            async with async_session() as db:
                counted = await record_completed_session(db, patient["patient_id"], series["id"])
                await db.commit()
                return counted

        return await asyncio.gather(one(), one())

    assert run(submit_together()) == [True, True]
    assert client.get("/api/my-series", headers=patient["headers"]).json()["completedSessions"] == 2


def test_failed_reassignment_keeps_the_previous_series_active(client, instructor, patient, series, six_postures):
    replacement = create_series(client, instructor["headers"], six_postures, name="Segunda")
    assign(client, instructor["headers"], patient["patient_id"], series["id"])

    async def reassign_with_failing_commit():
        async with async_session() as db:
            owner = await db.get(User, instructor["user"]["id"])

            async def failing_commit():
                raise RuntimeError("database went away")

            db.commit = failing_commit
            with pytest.raises(RuntimeError):
                await assign_series(db, patient["patient_id"], replacement["id"], owner)

        async with async_session() as db:
            result = await db.execute(
                select(PatientSeries.series_id, PatientSeries.is_active)
                .where(PatientSeries.patient_id == patient["patient_id"])
            )
            return result.all()

    rows = run(reassign_with_failing_commit())
    assert [(series_id, active) for series_id, active in rows] == [(series["id"], True)]
    assert client.get("/api/my-series", headers=patient["headers"]).json()["series"]["id"] == series["id"]
