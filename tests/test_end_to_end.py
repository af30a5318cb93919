"""A patient completes a guided session against the real app."""

from conftest import PASSWORD

from yoga_therapy.client.api_client import ApiClient
from yoga_therapy.client.scheduler import ManualScheduler
from yoga_therapy.client.walkthrough import Phase, SessionWalkthrough
from yoga_therapy.schemas.series import SeriesCreate


def test_guided_session(client):
    instructor = ApiClient(http=client)
    account = instructor.register("instructor@example.com", PASSWORD, "Ana Instructora", "instructor")

    patient = ApiClient(http=client)
    patient.register("patient@example.com", PASSWORD, "Pablo Paciente", "patient", instructor_id=account.id)

    therapy_type = instructor.therapy_types()[0]
    posture_ids = [p.id for p in instructor.postures()]
    series = instructor.create_series(
        SeriesCreate(
            name="Calma",
            therapy_type_id=therapy_type.id,
            posture_ids=(posture_ids * 2)[:6],
            posture_durations=[60, 60, 90, 90, 120, 120],
            recommended_sessions=10,
        )
    )
    assert series.estimated_duration == 9

    [profile] = instructor.patients()
    instructor.assign_series(profile.id, series.id)

    # fresh login, as the patient app would do
    patient.logout()
    patient.login("patient@example.com", PASSWORD)
    assignment = patient.my_series()
    assert assignment is not None
    assert assignment.completed_sessions == 0

    completed = []
    scheduler = ManualScheduler()
    walkthrough = SessionWalkthrough(
        assignment.series, patient.postures(), scheduler, on_complete=completed.append
    )
    assert walkthrough.total_steps == 6

    walkthrough.select_pre_intensity("moderate")
    walkthrough.start()
    scheduler.advance(539)
    assert walkthrough.phase is Phase.EXECUTION
    assert walkthrough.current_index == 5
    scheduler.advance(1)
    assert walkthrough.phase is Phase.POST_ASSESSMENT

    walkthrough.select_post_intensity("none")
    walkthrough.set_comments("felt good")
    record = walkthrough.submit(patient)

    assert record.pre_intensity == "moderate"
    assert record.post_intensity == "none"
    assert record.duration == 9
    assert completed == [record]
    assert scheduler.active == 0

    assert patient.my_series().completed_sessions == 1
    assert [s.comments for s in patient.my_sessions()] == ["felt good"]
