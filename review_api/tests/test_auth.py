from datetime import timedelta

import pytest
from jose import jwt

from app.core.config import settings
from app.core.security import create_access_token
from app.db.models import User
from app.services import users as user_store


def _error(r):
	return r.json()["error"]


# ─────────────────────────────────────────────────────────────
# Register / login / me
# ─────────────────────────────────────────────────────────────
@pytest.mark.parametrize("username", ["alice", "bob_the_builder", "charlie99"])
def test_register_then_login_tokens_resolve_to_same_user(client, username):
	r = client.post("/auth/register", json={"username": username, "password": "password123"})
	assert r.status_code == 200
	body = r.json()
	assert body["message"] == "Registration successful!"
	assert body["user"]["username"] == username
	assert "password" not in body["user"] and "password_hash" not in body["user"]
	register_token = body["token"]

	r = client.post("/auth/login", json={"username": username, "password": "password123"})
	assert r.status_code == 200
	login_token = r.json()["token"]

	ids = set()
	for token in (register_token, login_token):
		me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
		assert me.status_code == 200
		assert me.json()["username"] == username
		ids.add(me.json()["id"])
	assert ids == {body["user"]["id"]}


def test_token_carries_id_and_username_with_one_week_expiry(client, alice):
	token, user, _ = alice
	claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
	assert claims["sub"] == str(user["id"])
	assert claims["username"] == "alice"
	assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60


@pytest.mark.parametrize(
	"payload",
	[{}, {"username": "alice"}, {"password": "password123"}, {"username": "", "password": "password123"}],
)
def test_register_missing_credentials(client, payload):
	r = client.post("/auth/register", json=payload)
	assert r.status_code == 400
	assert _error(r)["name"] == "MissingCredentialsError"


def test_register_password_too_short(client, db):
	r = client.post("/auth/register", json={"username": "alice", "password": "short"})
	assert r.status_code == 400
	assert _error(r)["name"] == "PasswordTooShortError"
	assert db.query(User).count() == 0


def test_register_duplicate_username_keeps_single_row(client, db, alice):
	r = client.post("/auth/register", json={"username": "alice", "password": "different123"})
	assert r.status_code == 409
	assert _error(r)["name"] == "UserExistsError"
	assert db.query(User).filter(User.username == "alice").count() == 1


def test_login_missing_credentials(client):
	r = client.post("/auth/login", json={"username": "alice"})
	assert r.status_code == 400
	assert _error(r)["name"] == "MissingCredentialsError"


@pytest.mark.parametrize("path", ["/auth/register", "/auth/login"])
def test_auth_without_body_is_missing_credentials(client, path):
	r = client.post(path)
	assert r.status_code == 400
	assert _error(r)["name"] == "MissingCredentialsError"


def test_login_failure_is_uniform(client, alice):
	wrong_password = client.post("/auth/login", json={"username": "alice", "password": "nope-nope-nope"})
	unknown_user = client.post("/auth/login", json={"username": "nobody", "password": "password123"})

	assert wrong_password.status_code == unknown_user.status_code == 401
	assert _error(wrong_password)["name"] == _error(unknown_user)["name"] == "InvalidCredentialsError"
	assert _error(wrong_password)["message"] == _error(unknown_user)["message"]


def test_me_requires_identity(client):
	r = client.get("/auth/me")
	assert r.status_code == 401
	assert _error(r)["name"] == "NotAuthenticatedError"


# ─────────────────────────────────────────────────────────────
# Authentication gate
# ─────────────────────────────────────────────────────────────
def test_anonymous_request_proceeds_on_public_endpoint(client):
	r = client.get("/items")
	assert r.status_code == 200
	assert r.json() == {"items": []}


@pytest.mark.parametrize("header", ["Token abc", "bearer abc", "Basic dXNlcjpwYXNz"])
def test_malformed_header_is_rejected_even_on_public_endpoint(client, header):
	r = client.get("/items", headers={"Authorization": header})
	assert r.status_code == 401
	assert _error(r)["name"] == "AuthorizationHeaderError"


def test_garbage_token_is_invalid(client):
	r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
	assert r.status_code == 401
	assert _error(r)["name"] == "InvalidTokenError"


def test_token_signed_with_other_secret_is_invalid(client, alice):
	_, user, _ = alice
	forged = jwt.encode(
		{"sub": str(user["id"]), "username": "alice", "type": "access"},
		"some-other-secret",
		algorithm=settings.JWT_ALG,
	)
	r = client.get("/auth/me", headers={"Authorization": f"Bearer {forged}"})
	assert r.status_code == 401
	assert _error(r)["name"] == "InvalidTokenError"


def test_tampered_payload_is_invalid(client, alice, bob):
	alice_token, _, _ = alice
	bob_token, _, _ = bob
	header, _, signature = alice_token.split(".")
	_, bob_payload, _ = bob_token.split(".")
	tampered = ".".join([header, bob_payload, signature])

	r = client.get("/auth/me", headers={"Authorization": f"Bearer {tampered}"})
	assert r.status_code == 401
	assert _error(r)["name"] == "InvalidTokenError"


def test_expired_token_is_invalid(client, db, alice):
	_, user, _ = alice
	expired = create_access_token(user_store.get_user_by_id(db, user["id"]), expires_delta=timedelta(seconds=-60))

	r = client.get("/auth/me", headers={"Authorization": f"Bearer {expired}"})
	assert r.status_code == 401
	assert _error(r)["name"] == "InvalidTokenError"


def test_token_without_subject_is_invalid(client):
	token = jwt.encode({"type": "access", "username": "ghost"}, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
	r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
	assert r.status_code == 401
	assert _error(r)["name"] == "InvalidTokenError"


def test_token_for_removed_user_is_invalid_not_anonymous(client, db, alice):
	_, user, headers = alice
	db.delete(user_store.get_user_by_id(db, user["id"]))
	db.commit()

	# Even a public endpoint must not silently downgrade to anonymous
	r = client.get("/items", headers=headers)
	assert r.status_code == 401
	assert _error(r)["name"] == "InvalidTokenError"


# ─────────────────────────────────────────────────────────────
# Credential store
# ─────────────────────────────────────────────────────────────
def test_password_is_stored_hashed(db):
	user = user_store.create_user(db, "dave", "password123")
	assert user.password_hash != "password123"
	assert user.password_hash.startswith("$2")


def test_verify_credentials(db):
	user = user_store.create_user(db, "erin", "password123")
	assert user_store.verify_credentials(db, "erin", "password123").id == user.id
	assert user_store.verify_credentials(db, "erin", "wrong-password") is None
	assert user_store.verify_credentials(db, "nobody", "password123") is None


def test_create_user_duplicate_raises_user_exists(db):
	from app.core.errors import UserExistsError

	user_store.create_user(db, "frank", "password123")
	with pytest.raises(UserExistsError):
		user_store.create_user(db, "frank", "password456")
	assert db.query(User).filter(User.username == "frank").count() == 1


def test_lookup_by_id_and_username(db):
	user = user_store.create_user(db, "grace", "password123")
	assert user_store.get_user_by_id(db, user.id).username == "grace"
	assert user_store.get_user_by_username(db, "grace").id == user.id
	assert user_store.get_user_by_id(db, 9999) is None
	assert user_store.get_user_by_username(db, "nobody") is None
