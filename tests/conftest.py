from typing import Callable, Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

from app.db.session import build_engine, get_session
from app.main import app
from app.models import User, UserRole
from app.services.auth import AuthService


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    sent = []

    def fake_send(to_email, user_name, token):
        sent.append({"to": to_email, "name": user_name, "token": token})
        return True

    monkeypatch.setattr("app.services.auth.send_password_reset_email", fake_send)
    return sent


@pytest.fixture
def make_user(session) -> Callable[..., User]:
    def factory(email: str, password: str = "secret123", name: str = "Asha", admin: bool = False) -> User:
        user = AuthService(session).register_user(email, password, name=name)
        if admin:
            user.role = UserRole.ADMIN
            session.add(user)
            session.commit()
            session.refresh(user)
        return user

    return factory


def auth_headers(session: Session, user: User) -> Dict[str, str]:
    token = AuthService(session).create_token_for(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(make_user):
    return make_user("asha@example.com")


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", name="Admin", admin=True)


@pytest.fixture
def user_headers(session, user):
    return auth_headers(session, user)


@pytest.fixture
def admin_headers(session, admin):
    return auth_headers(session, admin)


class Store:
    """A file-backed SQLite database standing in for one of the two stores."""

    def __init__(self, path):
        self.url = f"sqlite:///{path}"
        self.engine = build_engine(self.url)
        SQLModel.metadata.create_all(self.engine)

    def add(self, *rows):
        with Session(self.engine, expire_on_commit=False) as session:
            for row in rows:
                session.add(row)
                session.commit()

    def get(self, model, pk):
        with Session(self.engine) as session:
            return session.get(model, pk)

    def dispose(self):
        self.engine.dispose()


@pytest.fixture
def primary(tmp_path):
    store = Store(tmp_path / "primary.db")
    yield store
    store.dispose()


@pytest.fixture
def secondary(tmp_path):
    store = Store(tmp_path / "secondary.db")
    yield store
    store.dispose()


@pytest.fixture
def headers_for(session) -> Callable[[User], Dict[str, str]]:
    return lambda user: auth_headers(session, user)
