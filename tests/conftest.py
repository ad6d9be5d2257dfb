import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from habitlog import crud
from habitlog.db import enable_sqlite_foreign_keys, get_db
from habitlog.main import create_app
from habitlog.models.base import Base


def make_session():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def SessionLocal():
    return make_session()


@pytest.fixture()
def demo_user_id(SessionLocal):
    with SessionLocal() as db:
        return crud.get_or_create_demo_user(db).id


@pytest.fixture()
def test_app():
    TestingSessionLocal = make_session()
    app = create_app()

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return app, TestingSessionLocal


@pytest.fixture()
def client(test_app):
    app, _ = test_app
    return TestClient(app)


@pytest.fixture()
def gym_habit(client):
    resp = client.post("/habits/templates/gym")
    assert resp.status_code == 201
    return resp.json()
