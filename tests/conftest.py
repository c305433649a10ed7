"""
Shared fixtures: an in-memory database per test, a TestClient bound to it,
and helpers for creating users and auth headers.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pathwise.core import config
from pathwise.core.auth_dependency import get_db
from pathwise.core.rate_limit import rate_limit_store
from pathwise.core.security import hash_password, create_session_token
from pathwise.db.base import Base
from pathwise.db.models.user import User
from pathwise.llm.provider import LLMProvider, LLMResponse, LLMError
from pathwise.llm.router import set_llm_provider
from pathwise.main import app
import pathwise.db.models  # noqa: F401

TEST_PASSWORD = "testpass123"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeLLMProvider(LLMProvider):
    """Returns canned responses in order; raises LLMError when given an exception marker."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def chat(self, messages, model=None, temperature=0.7, max_tokens=None, **kwargs):
        self.calls.append(messages)
        response = self.responses.pop(0) if self.responses else ""
        if isinstance(response, Exception):
            raise response
        return LLMResponse(content=response, model="fake")


class FailingLLMProvider(LLMProvider):
    def chat(self, messages, model=None, temperature=0.7, max_tokens=None, **kwargs):
        raise LLMError("upstream unavailable")


@pytest.fixture(autouse=True)
def _isolated_state(monkeypatch, tmp_path):
    """Fresh schema, no AI, no SMTP, empty rate limiter and a temp upload dir for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    rate_limit_store.clear()
    set_llm_provider(None)
    monkeypatch.setattr(config, "SMTP_HOST", None)
    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path / "uploads"))
    yield
    set_llm_provider(None)


@pytest.fixture
def db():
    """Database session fixture."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, email="jane@example.com", name="Jane Doe", verified=True, password=TEST_PASSWORD, **kwargs) -> User:
    user = User(
        email=email,
        name=name,
        password_hash=hash_password(password) if password else None,
        is_email_verified=verified,
        **kwargs
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_user(db):
    return make_user(db)


@pytest.fixture
def auth_headers(test_user):
    return {"Authorization": f"Bearer {create_session_token(test_user)}"}


@pytest.fixture
def user_factory(db):
    def factory(**kwargs):
        return make_user(db, **kwargs)
    return factory


@pytest.fixture
def fake_llm():
    """Install a FakeLLMProvider answering with the given responses."""
    def install(*responses):
        provider = FakeLLMProvider(*responses)
        set_llm_provider(provider)
        return provider
    return install


@pytest.fixture
def failing_llm():
    provider = FailingLLMProvider()
    set_llm_provider(provider)
    return provider
