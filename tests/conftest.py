import pytest
from fastapi.testclient import TestClient

import main


class FakeGemini:
    """Stands in for the Gemini client and records the prompts it receives."""

    model = "fake-model"

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def client():
    return TestClient(main.app)


@pytest.fixture
def fake_model(monkeypatch):
    def install(reply=None, error=None):
        fake = FakeGemini(reply=reply, error=error)
        monkeypatch.setattr(main, "model_client", fake)
        return fake
    return install
