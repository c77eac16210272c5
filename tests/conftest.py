import os
import sys

import pytest

# configure before campusnav.config is first imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["GEMINI_API_KEY"] = ""

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../backend"))

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from campusnav.api.deps import get_intent_extractor
from campusnav.db import enable_sqlite_foreign_keys, get_db
from campusnav.main import app
from campusnav.models import AdminRole, Base
from campusnav.seed import seed
from campusnav.services.assistant import IntentExtractor
from campusnav.services.auth import create_admin


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(eng)
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = Session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_intent_extractor] = lambda: IntentExtractor()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db):
    return create_admin(
        db, "Admin", "admin@example.com", "password", name="Super Admin", role=AdminRole.SUPERADMIN, rounds=4
    )


@pytest.fixture
def auth_headers(client, admin_user):
    res = client.post("/auth/login", json={"username": "admin", "password": "password"})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['token']}"}


@pytest.fixture
def campus(db):
    """Seeded demo campus: three pins and the default Welcome Center to Library route."""
    return seed(db, rounds=4)


@pytest.fixture
def seeded_headers(client, campus):
    # the seed creates admin/password
    res = client.post("/auth/login", json={"username": "admin", "password": "password"})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['token']}"}
