import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

os.environ.setdefault("DATABASE_DSN", "sqlite://")

from tiffin import main
from tiffin.config import settings
from tiffin.schemas.auth import AuthenticatedPrincipal
from tiffin.services.auth import hash_password, issue_tokens
from tiffin.storage import db as db_module
from tiffin.storage.models import PriceSetting, Role, User


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(monkeypatch, engine):
    monkeypatch.setattr(db_module, "engine", engine)
    client = TestClient(main.app)
    return client


@pytest.fixture
def make_user(session):
    def _make(email: str = "demo@tiffin.com", role: Role = Role.USER, name: str = "Demo User") -> User:
        user = User(email=email, name=name, role=role, password_hash=hash_password("demo123"))
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def user(make_user) -> User:
    return make_user()


@pytest.fixture
def other_user(make_user) -> User:
    return make_user(email="other@tiffin.com", name="Other User")


@pytest.fixture
def admin(make_user) -> User:
    return make_user(email="admin@tiffin.com", role=Role.ADMIN, name="Admin User")


@pytest.fixture
def principal(user) -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(id=user.id, role=user.role)


@pytest.fixture
def other_principal(other_user) -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(id=other_user.id, role=other_user.role)


@pytest.fixture
def admin_principal(admin) -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(id=admin.id, role=admin.role)


@pytest.fixture
def prices(session, user) -> PriceSetting:
    setting = PriceSetting(
        user_id=user.id,
        breakfast=Decimal("40.00"),
        lunch=Decimal("80.00"),
        dinner=Decimal("70.00"),
        custom=Decimal("0"),
    )
    session.add(setting)
    session.commit()
    session.refresh(setting)
    return setting


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {issue_tokens(user)['access_token']}"}

    return _headers
