"""Tests for the Gemini REST client."""

import pytest
import requests
from unittest.mock import MagicMock, patch

from gemini_client import Gemini, GeminiError


def make_response(status_code=200, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.json.return_value = payload
    return response


def text_payload(*chunks):
    return {"candidates": [{"content": {"parts": [{"text": c} for c in chunks]}, "finishReason": "STOP"}]}


def test_client_initialization_defaults(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "env-key")
    monkeypatch.delenv("PROXY_URL", raising=False)
    client = Gemini()
    assert client.api_key == "env-key"
    assert client.max_output_tokens == 2048
    assert client.session.proxies == {}


def test_client_uses_proxy():
    client = Gemini(api_key="k", proxy_url="http://proxy:8080")
    assert client.session.proxies == {"http": "http://proxy:8080", "https": "http://proxy:8080"}


def test_generate_posts_prompt_and_joins_parts():
    client = Gemini(api_key="test-key", model="gemini-test")
    with patch.object(requests.Session, "post", return_value=make_response(payload=text_payload("[", "]"))) as post:
        result = client.generate("hello")

    assert result == "[]"
    args, kwargs = post.call_args
    assert args[0].endswith("/models/gemini-test:generateContent")
    assert kwargs["headers"] == {"x-goog-api-key": "test-key"}
    assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "hello"
    assert kwargs["json"]["generationConfig"] == {"maxOutputTokens": 2048}


def test_generate_without_key_raises(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    client = Gemini()
    with patch.object(requests.Session, "post") as post:
        with pytest.raises(GeminiError):
            client.generate("hello")
    post.assert_not_called()


def test_generate_non_200_raises():
    client = Gemini(api_key="k")
    with patch.object(requests.Session, "post", return_value=make_response(status_code=403, text="denied")):
        with pytest.raises(GeminiError, match="403"):
            client.generate("hello")


def test_generate_without_candidates_raises():
    client = Gemini(api_key="k")
    payload = {"promptFeedback": {"blockReason": "SAFETY"}}
    with patch.object(requests.Session, "post", return_value=make_response(payload=payload)):
        with pytest.raises(GeminiError, match="No candidates"):
            client.generate("hello")


def test_generate_with_empty_text_raises():
    client = Gemini(api_key="k")
    payload = {"candidates": [{"content": {"parts": []}, "finishReason": "MAX_TOKENS"}]}
    with patch.object(requests.Session, "post", return_value=make_response(payload=payload)):
        with pytest.raises(GeminiError, match="MAX_TOKENS"):
            client.generate("hello")


def test_generate_with_undecodable_body_raises():
    client = Gemini(api_key="k")
    response = make_response()
    response.json.side_effect = ValueError("Expecting value")
    with patch.object(requests.Session, "post", return_value=response):
        with pytest.raises(GeminiError):
            client.generate("hello")
