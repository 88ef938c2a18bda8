import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("NODE_ENV", "test")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
os.environ.setdefault("DATABASE_URL", "sqlite:///./kidoai-test.db")
os.environ.pop("API_TOKEN", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from kidoai import models  # noqa: F401
from kidoai.db import Base, get_db
from kidoai.main import app
from kidoai.ratelimit import reset_all
from kidoai import users


@pytest.fixture(autouse=True)
def _reset_rate_limits():
	reset_all()
	yield
	reset_all()


@pytest.fixture
def session_factory(tmp_path):
	engine = create_engine(
		f"sqlite:///{tmp_path / 'test.db'}",
		connect_args={"check_same_thread": False},
		future=True,
	)
	Base.metadata.create_all(bind=engine)
	factory = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
	yield factory
	engine.dispose()


@pytest.fixture
def db(session_factory):
	session = session_factory()
	try:
		yield session
	finally:
		session.close()


@pytest.fixture
def client(session_factory):
	def _get_test_db():
		session = session_factory()
		try:
			yield session
		finally:
			session.close()

	app.dependency_overrides[get_db] = _get_test_db
	try:
		yield TestClient(app)
	finally:
		app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
	def _make_user(name="Ana Lopez", email="ana@example.com", password="Secret123", **kwargs):
		return users.create_user(db, name=name, email=email, password=password, **kwargs)
	return _make_user


@pytest.fixture
def signup(client):
	def _signup(name="Ana Lopez", email="ana@example.com", password="Secret123"):
		return client.post("/user/signup", json={"name": name, "email": email, "password": password})
	return _signup


@pytest.fixture
def token(signup):
	return signup().json()["token"]


@pytest.fixture
def auth(token):
	return {"Authorization": f"Bearer {token}"}
