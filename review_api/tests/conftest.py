# tests/conftest.py
import os
import tempfile

# Settings are read at import time, so the environment has to be ready first
_tmp_dir = tempfile.mkdtemp(prefix="review-api-tests-")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'import.db')}"
os.environ["SEED_CATALOG"] = "false"
os.environ["API_PREFIX"] = ""

import pytest
from fastapi.testclient import TestClient

from app.db.session import make_engine
from app.main import create_app
from app.services import items as item_store

PASSWORD = "password123"


@pytest.fixture
def engine():
	engine = make_engine("sqlite://")
	yield engine
	engine.dispose()


@pytest.fixture
def app(engine):
	return create_app(engine=engine, seed=False)


@pytest.fixture
def db(app):
	session = app.state.session_factory()
	try:
		yield session
	finally:
		session.close()


@pytest.fixture
def client(app):
	with TestClient(app) as c:
		yield c


# ─────────────────────────────────────────────────────────────
# Users & auth
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def register(client):
	"""Register a user through the API and return (token, user, headers)."""

	def _register(username: str, password: str = PASSWORD):
		r = client.post("/auth/register", json={"username": username, "password": password})
		assert r.status_code == 200, r.text
		body = r.json()
		headers = {"Authorization": f"Bearer {body['token']}"}
		return body["token"], body["user"], headers

	return _register


@pytest.fixture
def alice(register):
	return register("alice")


@pytest.fixture
def bob(register):
	return register("bob")


# ─────────────────────────────────────────────────────────────
# Catalog
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def item(db):
	return item_store.create_item(db, "The Great Novel", "A truly captivating story.", "Book")


@pytest.fixture
def other_item(db):
	return item_store.create_item(db, "Tasty Bites Cafe", "Cozy place with great coffee.", "Restaurant")


@pytest.fixture
def review(client, alice, item):
	"""A review of ``item`` written by alice, as returned by the API."""
	_, _, headers = alice
	r = client.post(
		f"/items/{item.id}/reviews",
		json={"rating": 5, "reviewText": "Absolutely loved this book!"},
		headers=headers,
	)
	assert r.status_code == 201, r.text
	return r.json()["review"]


@pytest.fixture
def comment(client, bob, review):
	"""A comment by bob on alice's review."""
	_, _, headers = bob
	r = client.post(
		f"/reviews/{review['id']}/comments",
		json={"commentText": "I agree, it was fantastic!"},
		headers=headers,
	)
	assert r.status_code == 201, r.text
	return r.json()["comment"]
