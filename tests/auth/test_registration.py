"""
Tests for registration and visitor upgrade.
"""
from portal.auth.models import User, UserRole
from portal.core.security import hash_password, verify_password


def test_register_new_user_starts_session(client, register, db):
    response = register("new@clinicmail.com", first_name="Ada")

    assert response.status_code == 200
    assert response.json() == {"message": "OK"}
    assert response.cookies.get("access-token")
    assert response.cookies.get("refresh-token")

    user = db.query(User).filter(User.email == "new@clinicmail.com").one()
    assert user.role == UserRole.PATIENT
    assert user.first_name == "Ada"
    assert user.token_generation == 0
    assert user.password_hash != "Password123!"


def test_register_lowercases_email(client, register, db):
    register("Mixed.Case@ClinicMail.com")

    assert db.query(User).filter(User.email == "mixed.case@clinicmail.com").count() == 1


def test_register_existing_patient_reports_exists(client, register, db):
    assert register("a@clinicmail.com", "pw1").json() == {"message": "OK"}
    client.cookies.clear()

    response = register("a@clinicmail.com", "pw2")

    assert response.status_code == 200
    assert response.json() == {"message": "EXISTS"}
    assert "access-token" not in response.cookies
    assert db.query(User).filter(User.email == "a@clinicmail.com").count() == 1
    user = db.query(User).filter(User.email == "a@clinicmail.com").one()
    assert verify_password("pw1", user.password_hash)


def test_register_existing_patient_with_different_case_reports_exists(client, register):
    register("case@clinicmail.com")

    assert register("CASE@clinicmail.com").json() == {"message": "EXISTS"}


def test_register_upgrades_visitor_in_place(client, register, db):
    visitor = User(
        email="visitor@clinicmail.com",
        password_hash=hash_password("placeholder"),
        role=UserRole.VISITOR,
        first_name="Guest",
        telephone="555-0100"
    )
    db.add(visitor)
    db.commit()
    visitor_id = visitor.id

    response = register("visitor@clinicmail.com", "NewSecret1", first_name="Grace")

    assert response.json() == {"message": "OK"}
    assert response.cookies.get("access-token")

    db.expire_all()
    users = db.query(User).filter(User.email == "visitor@clinicmail.com").all()
    assert len(users) == 1
    user = users[0]
    assert user.id == visitor_id
    assert user.role == UserRole.PATIENT
    assert user.first_name == "Grace"
    # Fields not submitted are kept from the placeholder
    assert user.telephone == "555-0100"
    assert verify_password("NewSecret1", user.password_hash)


def test_upgraded_visitor_cannot_register_twice(client, register, db):
    db.add(User(email="v2@clinicmail.com", password_hash=hash_password("x"), role=UserRole.VISITOR))
    db.commit()

    assert register("v2@clinicmail.com").json() == {"message": "OK"}
    assert register("v2@clinicmail.com").json() == {"message": "EXISTS"}
    assert db.query(User).filter(User.email == "v2@clinicmail.com").count() == 1


def test_register_rejects_invalid_email(client, register):
    response = register("not-an-email")

    assert response.status_code == 422
