from datetime import timedelta

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from config import settings
from models.business_profile import BusinessProfile
from models.users import User
from services import accounts, moderation
from utils.tokenJWT import create_access_token, get_optional_user


def test_register_returns_token_and_user_without_secret(register):
    resp = register("alice@test.local", phone="+91 99999 00000")
    assert resp.status_code == 201, resp.text

    body = resp.json()
    assert body["token"]
    assert body["user"]["email"] == "alice@test.local"
    assert body["user"]["role"] == "individual"
    assert body["user"]["status"] == "active"
    assert "password_hash" not in resp.text
    assert "password" not in body["user"]

    cookie = resp.headers.get("set-cookie", "").lower()
    assert "ecohub_token=" in cookie
    assert "httponly" in cookie


def cookie_attributes(resp):
    header = resp.headers.get("set-cookie", "")
    return [part.strip().lower() for part in header.split(";")]


def test_cookie_is_secure_in_production(register, monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    resp = register("prod@test.local")
    assert resp.status_code == 201
    assert "secure" in cookie_attributes(resp)


def test_cookie_is_not_secure_outside_production(register):
    resp = register("dev@test.local")
    assert "secure" not in cookie_attributes(resp)
    assert "samesite=lax" in cookie_attributes(resp)


def test_cookie_samesite_is_configurable(register, monkeypatch):
    monkeypatch.setattr(settings, "COOKIE_SAMESITE", "strict")
    resp = register("strict@test.local")
    assert "samesite=strict" in cookie_attributes(resp)


def test_register_business_creates_pending_profile(register):
    resp = register(
        "acme@test.local",
        role="business",
        businessProfile={"name": "Acme", "type": "private", "city": "Pune"},
    )
    assert resp.status_code == 201, resp.text

    profile = resp.json()["user"]["businessProfile"]
    assert profile["business_name"] == "Acme"
    assert profile["business_type"] == "private"
    assert profile["verification_status"] == "pending"
    assert resp.json()["user"]["communityProfile"] is None


def test_register_community_creates_pending_profile(register):
    resp = register(
        "greens@test.local",
        role="community",
        communityProfile={
            "organization_name": "Green Streets",
            "organization_type": "ngo",
            "focus_areas": ["recycling", "trees"],
        },
    )
    assert resp.status_code == 201, resp.text
    profile = resp.json()["user"]["communityProfile"]
    assert profile["verification_status"] == "pending"
    assert profile["focus_areas"] == ["recycling", "trees"]


def test_register_duplicate_email_is_rejected(register, db):
    assert register("dup@test.local").status_code == 201

    resp = register("DUP@Test.local")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"
    assert db.query(User).count() == 1


def test_register_race_on_email_is_a_validation_error(register, db, monkeypatch):
    assert register("race@test.local").status_code == 201

    # Second request passes the lookup as if the first had not committed yet
    monkeypatch.setattr(accounts, "get_user_by_email", lambda db, email: None)
    resp = register("race@test.local")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"
    assert db.query(User).count() == 1


def test_register_validation_errors(register, db):
    assert register("short@test.local", password="abc").status_code == 400
    assert register("role@test.local", role="admin").status_code == 400
    assert register("bad-email", role="individual").status_code == 400

    # Profile payload is checked before the account is written
    resp = register("acme@test.local", role="business", businessProfile={"business_name": "Acme"})
    assert resp.status_code == 400
    assert db.query(User).count() == 0
    assert db.query(BusinessProfile).count() == 0


def test_login_success_updates_last_login(client, register, login, db):
    register("bob@test.local")
    client.cookies.clear()

    resp = login("bob@test.local")
    assert resp.status_code == 200, resp.text
    assert resp.json()["token"]
    assert resp.json()["user"]["impact"]["total_trees_planted"] == 0

    user = db.query(User).filter(User.email == "bob@test.local").one()
    assert user.last_login is not None


def test_login_wrong_password_and_unknown_email(create_user, login):
    create_user("carol@test.local")
    assert login("carol@test.local", "wrong-pass").status_code == 401
    assert login("nobody@test.local").status_code == 401


def test_login_suspended_account_is_forbidden(create_user, login):
    create_user("sus@test.local", status="suspended")
    resp = login("sus@test.local")
    assert resp.status_code == 403
    assert "token" not in resp.json()


def test_verify_returns_current_account(create_user, token_for, client):
    create_user("dave@test.local", role="business")
    headers = token_for("dave@test.local")

    resp = client.get("/auth/verify", headers=headers)
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["email"] == "dave@test.local"
    assert user["impact"] is not None


def test_verify_token_errors(client, create_user):
    user = create_user("erin@test.local")

    assert client.get("/auth/verify").status_code == 401
    assert client.get("/auth/verify", headers={"Authorization": "Bearer not-a-token"}).status_code == 403

    expired = create_access_token(user, expires_delta=timedelta(seconds=-30))
    resp = client.get("/auth/verify", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token expired"


def test_cookie_carries_the_session(client, register):
    register("frank@test.local")
    # No Authorization header: the cookie set by register is enough
    resp = client.get("/auth/verify")
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == "frank@test.local"


def test_token_issued_before_suspension_is_rejected(client, create_user, admin, token_for, db):
    user = create_user("gina@test.local")
    headers = token_for("gina@test.local")
    assert client.get("/auth/verify", headers=headers).status_code == 200

    moderation.suspend(db, user.id, "spam", admin.id)

    for _ in range(3):
        resp = client.get("/auth/verify", headers=headers)
        assert resp.status_code == 403

    moderation.activate(db, user.id, admin.id)
    assert client.get("/auth/verify", headers=headers).status_code == 200


def test_optional_user_never_fails(create_user, token_for, db, admin):
    probe = FastAPI()

    @probe.get("/whoami")
    def whoami(user=Depends(get_optional_user)):
        return {"email": user.email if user else None}

    create_user("hank@test.local")
    headers = token_for("hank@test.local")
    probe_client = TestClient(probe)

    assert probe_client.get("/whoami").json() == {"email": None}
    assert probe_client.get("/whoami", headers={"Authorization": "Bearer junk"}).json() == {"email": None}
    assert probe_client.get("/whoami", headers=headers).json() == {"email": "hank@test.local"}

    user = db.query(User).filter(User.email == "hank@test.local").one()
    moderation.suspend(db, user.id, None, admin.id)
    assert probe_client.get("/whoami", headers=headers).json() == {"email": None}


def test_profile_update_ignores_unknown_fields(client, register, db):
    register(
        "ivy@test.local",
        role="business",
        businessProfile={"business_name": "Ivy Co", "business_type": "private"},
    )

    resp = client.put("/auth/profile", json={
        "name": "Ivy",
        "role": "admin",
        "status": "suspended",
        "email": "other@test.local",
        "password_hash": "plain",
        "businessProfile": {"city": "Delhi", "verification_status": "approved", "user_id": 999},
    })
    assert resp.status_code == 200, resp.text

    db.expire_all()
    user = db.query(User).filter(User.email == "ivy@test.local").one()
    assert user.name == "Ivy"
    assert user.role == "business"
    assert user.status == "active"
    assert user.password_hash != "plain"
    assert user.business_profile.city == "Delhi"
    assert user.business_profile.verification_status == "pending"
    assert user.business_profile.user_id == user.id


def test_profile_update_with_only_unknown_fields_changes_nothing(client, register, db):
    register("jack@test.local", name="Jack")
    before = db.query(User).filter(User.email == "jack@test.local").one()
    snapshot = (before.name, before.phone, before.avatar, before.role, before.status)

    resp = client.put("/auth/profile", json={"nickname": "J", "role": "admin"})
    assert resp.status_code == 200

    db.expire_all()
    after = db.query(User).filter(User.email == "jack@test.local").one()
    assert (after.name, after.phone, after.avatar, after.role, after.status) == snapshot


def test_change_password(client, register, login):
    register("kate@test.local")

    resp = client.put("/auth/password", json={"currentPassword": "wrong-pass", "newPassword": "newpass123"})
    assert resp.status_code == 401

    resp = client.put("/auth/password", json={"currentPassword": "pass1234", "newPassword": "abc"})
    assert resp.status_code == 400

    resp = client.put("/auth/password", json={"currentPassword": "pass1234", "newPassword": "newpass123"})
    assert resp.status_code == 200

    client.cookies.clear()
    assert login("kate@test.local", "pass1234").status_code == 401
    assert login("kate@test.local", "newpass123").status_code == 200


def test_logout_clears_cookie(client, register):
    register("liam@test.local")
    resp = client.post("/auth/logout")
    assert resp.status_code == 200

    cookie = resp.headers.get("set-cookie", "").lower()
    assert "ecohub_token=" in cookie
    assert "max-age=0" in cookie
    assert client.get("/auth/verify").status_code == 401


def test_login_rate_limit(create_user, login):
    create_user("mia@test.local")

    for _ in range(5):
        assert login("mia@test.local", "wrong-pass").status_code == 401

    # Over the threshold even correct credentials are refused
    resp = login("mia@test.local")
    assert resp.status_code == 429
    assert "Too many login attempts" in resp.json()["detail"]


def test_permissions_endpoint(create_user, token_for, client):
    create_user("noah@test.local", role="business")
    headers = token_for("noah@test.local")

    resp = client.get("/auth/permissions", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["role"] == "business"
    assert "list_waste" in body["permissions"]
    assert "create_campaign" not in body["permissions"]
