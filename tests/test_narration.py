from types import SimpleNamespace

import pytest

from shams.narration import (
    DEFAULT_MODEL,
    GeminiNarrator,
    NarrationError,
    build_prompt,
    narrate_or_fallback,
)


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, model, contents):
        self.calls.append((model, contents))
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


@pytest.fixture
def no_credentials(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


def _narrator_with(models, model="test-model"):
    narrator = GeminiNarrator(model=model, timeout_ms=1000)
    narrator._client = SimpleNamespace(models=models)
    return narrator


def test_prompt_keeps_arabic_and_numbers():
    prompt = build_prompt({"الحجم": 5.5, "location": "amman"}, "اشرح")
    assert "الحجم" in prompt
    assert "5.5" in prompt
    assert "اشرح" in prompt


def test_model_selection(monkeypatch):
    monkeypatch.delenv("GEMINI_MODEL", raising=False)
    assert GeminiNarrator().model == DEFAULT_MODEL

    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-pro")
    assert GeminiNarrator().model == "gemini-2.5-pro"
    assert GeminiNarrator(model="explicit").model == "explicit"


def test_timeout_from_environment(monkeypatch):
    monkeypatch.setenv("SHAMS_NARRATION_TIMEOUT_MS", "5000")
    assert GeminiNarrator().timeout_ms == 5000
    assert GeminiNarrator(timeout_ms=100).timeout_ms == 100


def test_missing_api_key_raises(no_credentials):
    with pytest.raises(NarrationError):
        GeminiNarrator().narrate({"a": 1})


def test_missing_api_key_falls_back(no_credentials):
    narration = narrate_or_fallback(GeminiNarrator(), {"a": 1}, "نص احتياطي")
    assert narration.text == "نص احتياطي"
    assert narration.is_fallback


def test_successful_narration():
    models = FakeModels(text="  شرح النتائج  ")
    narrator = _narrator_with(models)

    narration = narrate_or_fallback(narrator, {"size": 5}, "fallback", "اشرح")

    assert narration.text == "شرح النتائج"
    assert narration.source == "ai"
    assert not narration.is_fallback
    model, contents = models.calls[0]
    assert model == "test-model"
    assert "اشرح" in contents


def test_transport_error_becomes_narration_error():
    narrator = _narrator_with(FakeModels(error=RuntimeError("deadline exceeded")))
    with pytest.raises(NarrationError, match="deadline exceeded"):
        narrator.narrate({"size": 5})


def test_empty_response_is_an_error():
    narrator = _narrator_with(FakeModels(text=""))
    with pytest.raises(NarrationError):
        narrator.narrate({"size": 5})

    narration = narrate_or_fallback(narrator, {"size": 5}, "fallback")
    assert narration.is_fallback


def test_no_narrator_uses_template():
    narration = narrate_or_fallback(None, {}, "template text")
    assert narration.text == "template text"
    assert narration.source == "template"


def test_client_construction_failure_becomes_narration_error(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "test-key")
    narrator = GeminiNarrator(model="test-model")

    def broken_client():
        raise ValueError("invalid http options")

    monkeypatch.setattr(narrator, "_get_client", broken_client)

    with pytest.raises(NarrationError, match="invalid http options"):
        narrator.narrate({"size": 5})
    assert narrate_or_fallback(narrator, {"size": 5}, "fallback").is_fallback
