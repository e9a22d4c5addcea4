from __future__ import annotations

import os
from typing import Any

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ.setdefault("DB_URL", "sqlite:///./test.db")
    os.environ["ENVIRONMENT"] = "test"
    os.environ["JWT_SECRET"] = "test-secret"
    # No key: the real client stays offline and every AI call falls back.
    os.environ["OPENROUTER_API_KEY"] = ""


class FakeLLM:
    """Stands in for OpenRouterClient; replies are scripted per system prompt."""

    def __init__(self) -> None:
        from skillgap.llm.client import LLMModels

        self.models = LLMModels()
        self.available = True
        self.replies: dict[str, Any] = {}
        self.calls: list[dict[str, str]] = []

    def reply(self, system_prompt: str, payload: Any) -> None:
        self.replies[system_prompt] = payload

    def complete_json(self, model: str, system_prompt: str, user_prompt: str) -> Any:
        from skillgap.llm.client import LLMUnavailableError

        self.calls.append({"model": model, "system": system_prompt, "user": user_prompt})
        if system_prompt not in self.replies:
            raise LLMUnavailableError("no scripted reply")
        payload = self.replies[system_prompt]
        if isinstance(payload, Exception):
            raise payload
        return payload


@pytest.fixture()
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture()
def storage(tmp_path):
    from skillgap.services.storage import FileStorage

    return FileStorage(tmp_path / "uploads")


@pytest.fixture()
def client(fake_llm: FakeLLM, storage) -> Any:
    from skillgap.database import Base, engine
    from skillgap.main import create_app
    from skillgap.routers.dependencies import get_llm_client, get_storage

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    app = create_app()
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as c:
        yield c


def register_and_login(client: TestClient, email: str = "tester@example.com", password: str = "SecretPass123") -> dict:
    signup = client.post("/api/auth/signup", json={"email": email, "password": password, "name": "Test User"})
    assert signup.status_code == 201
    signin = client.post("/api/auth/signin", json={"email": email, "password": password})
    assert signin.status_code == 200
    return {"Authorization": f"Bearer {signin.json()['session']['access_token']}"}


@pytest.fixture()
def auth_headers(client: TestClient) -> dict:
    return register_and_login(client)
