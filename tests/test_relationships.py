"""
Tests for resolving a user's doctors and appointments.
"""
import pytest

from medcare.appointments.models import Appointment, Request
from medcare.appointments.service import (
    get_doctors_for_user, get_appointments_for_user, get_appointment_doctors_for_user,
    find_all_appointments
)
from medcare.auth.exceptions import AccountNotFoundError
from medcare.doctors.models import Doctor
from medcare.patients.models import Patient


def profile_of(db, model, user):
    return db.query(model).filter(model.cin == user.id).one()


@pytest.fixture
def clinic(db, register):
    """
    Two patients, two doctors, three requests and one appointment per request.

    Only the first request belongs to alice.
    """
    alice = register("alice", role="ROLE_PATIENT")
    bob = register("bob", role="ROLE_PATIENT")
    house = register("house", role="ROLE_DOCTOR")
    grey = register("grey", role="ROLE_DOCTOR")
    admin = register("admin", role="ROLE_ADMIN")

    p_alice, p_bob = profile_of(db, Patient, alice), profile_of(db, Patient, bob)
    d_house, d_grey = profile_of(db, Doctor, house), profile_of(db, Doctor, grey)

    requests = [
        Request(patient_id=p_alice.id, doctor_id=d_house.id),
        Request(patient_id=p_bob.id, doctor_id=d_house.id),
        Request(patient_id=p_bob.id, doctor_id=d_grey.id),
    ]
    db.add_all(requests)
    db.commit()
    appointments = [Appointment(request_id=request.id) for request in requests]
    db.add_all(appointments)
    db.commit()

    return {
        "alice": alice, "bob": bob, "house": house, "grey": grey, "admin": admin,
        "d_house": d_house, "d_grey": d_grey, "p_alice": p_alice,
        "requests": requests, "appointments": appointments,
    }


def test_doctors_for_patient_follow_matching_requests_only(db, clinic):
    doctors = get_doctors_for_user(db, "alice")
    assert len(doctors) == 1
    assert doctors[0].id == clinic["d_house"].id


def test_doctors_for_patient_keep_request_order(db, clinic):
    doctors = get_doctors_for_user(db, "bob")
    assert [doctor.id for doctor in doctors] == [clinic["d_house"].id, clinic["d_grey"].id]


def test_doctors_are_listed_once_per_request(db, clinic):
    db.add(Request(patient_id=clinic["p_alice"].id, doctor_id=clinic["d_house"].id))
    db.commit()
    doctors = get_doctors_for_user(db, "alice")
    assert [doctor.id for doctor in doctors] == [clinic["d_house"].id, clinic["d_house"].id]


def test_user_without_requests_has_no_doctors(db, clinic):
    assert get_doctors_for_user(db, "house") == []


def test_patient_sees_only_own_appointments(db, clinic):
    appointments = get_appointments_for_user(db, "alice")
    assert [a.id for a in appointments] == [clinic["appointments"][0].id]


@pytest.mark.parametrize("login", ["house", "admin"])
def test_non_patient_sees_all_appointments(db, clinic, login):
    appointments = get_appointments_for_user(db, login)
    assert [a.id for a in appointments] == [a.id for a in clinic["appointments"]]


def test_patient_appointments_are_a_strict_subset_of_the_global_view(db, clinic):
    own = {a.id for a in get_appointments_for_user(db, "alice")}
    everything = {a.id for a in get_appointments_for_user(db, "house")}
    assert own < everything
    assert everything == {a.id for a in find_all_appointments(db)}


def test_appointment_doctors_for_patient(db, clinic):
    doctors = get_appointment_doctors_for_user(db, "bob")
    assert [doctor.id for doctor in doctors] == [clinic["d_house"].id, clinic["d_grey"].id]


def test_appointment_doctors_filter_by_patient_for_every_role(db, clinic):
    assert get_appointment_doctors_for_user(db, "house") == []


def test_patient_key_compares_by_value_for_large_ids(db, register):
    user = register("zed", role="ROLE_PATIENT")
    doctor_user = register("who", role="ROLE_DOCTOR")
    patient = profile_of(db, Patient, user)
    doctor = profile_of(db, Doctor, doctor_user)
    # a second profile whose cin is a different large number must not match
    stranger = Patient(cin=10 ** 12 + user.id, name="stranger")
    db.add(stranger)
    db.commit()
    db.add_all([
        Request(patient_id=patient.id, doctor_id=doctor.id),
        Request(patient_id=stranger.id, doctor_id=doctor.id),
    ])
    db.commit()

    assert [d.id for d in get_doctors_for_user(db, "zed")] == [doctor.id]


@pytest.mark.parametrize("resolver", [
    get_doctors_for_user, get_appointments_for_user, get_appointment_doctors_for_user
])
def test_unknown_login_fails(db, resolver):
    with pytest.raises(AccountNotFoundError):
        resolver(db, "ghost")
