"""Tests for the palette generation endpoint."""
import pytest
from fastapi.testclient import TestClient

from ..core.cache import CacheClient, InMemoryCacheStore
from ..core.config import AppSettings
from ..core.errors import ErrorKind, GenerationError
from ..main import create_app
from ..models import is_hex_color
from ..services.fallbacks import DEFAULT_MOODS
from ..services.orchestrator import PaletteOrchestrator


class FailingGenerator:
    def __init__(self) -> None:
        self.calls = 0

    async def generate(self, prompt: str, *, model: str | None = None) -> str:
        self.calls += 1
        raise GenerationError("service down", kind=ErrorKind.FATAL, status_code=500)


def _settings(**overrides) -> AppSettings:
    values = {"redis_url": None, "gemini_api_key": None, "retry_base_delay": 0.0}
    values.update(overrides)
    return AppSettings(**values)


def _client(settings: AppSettings | None = None, **kwargs) -> TestClient:
    kwargs.setdefault("cache", CacheClient(InMemoryCacheStore()))
    return TestClient(create_app(settings or _settings(), **kwargs))


def test_generate_palettes_with_failing_model_returns_fallbacks() -> None:
    generator = FailingGenerator()
    with _client(generator=generator) as client:
        response = client.post(
            "/api/generatePalettes",
            json={"promptText": "sunset beach", "mode": "prompt", "paletteSize": 5},
        )

    assert response.status_code == 200
    data = response.json()
    assert "warning" not in data
    palettes = data["palettes"]
    assert [palette["mood"] for palette in palettes] == list(DEFAULT_MOODS)
    for palette in palettes:
        assert len(palette["colors"]) == 5
        assert all(is_hex_color(color["hex"]) for color in palette["colors"])
        assert len(palette["colors"][0]["rgb"]) == 3
        assert len(palette["colors"][0]["psychology"]["associations"]) == 3
        accessibility = palette["accessibility"]
        assert accessibility["colorBlindness"] == "Moderate"
        assert accessibility["contrast"] in {"Low", "Medium", "High"}
        assert accessibility["readability"] in {"Fair", "Good", "Excellent"}
        assert accessibility["wcag"]["normal"] in {"BelowAA", "AA", "AAA"}
        assert accessibility["wcag"]["large"] in {"BelowAA", "AA", "AAA"}
    assert generator.calls > 0


def test_user_moods_produce_one_palette_each() -> None:
    with _client(generator=FailingGenerator()) as client:
        response = client.post(
            "/api/generatePalettes",
            json={"promptText": "forest", "mode": "prompt", "userMoods": ["Calm", "Moss<script>"]},
        )

    assert response.status_code == 200
    palettes = response.json()["palettes"]
    assert [palette["mood"] for palette in palettes] == ["Calm", "Mossscript"]
    assert all(len(palette["colors"]) == 5 for palette in palettes)


def test_default_palette_size_comes_from_settings() -> None:
    settings = _settings(default_palette_size=4)
    with _client(settings, generator=FailingGenerator()) as client:
        response = client.post(
            "/api/generatePalettes",
            json={"promptText": "forest", "userMoods": ["Calm"]},
        )

    assert response.status_code == 200
    assert len(response.json()["palettes"][0]["colors"]) == 4


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"mode": "prompt"}, "Prompt is required"),
        ({"mode": "image", "promptText": "ignored"}, "Image is required"),
    ],
)
def test_missing_input_is_a_client_error(payload: dict, message: str) -> None:
    generator = FailingGenerator()
    with _client(generator=generator) as client:
        response = client.post("/api/generatePalettes", json=payload)

    assert response.status_code == 400
    assert response.json() == {"message": message}
    assert generator.calls == 0


def test_invalid_palette_size_is_rejected() -> None:
    with _client(generator=FailingGenerator()) as client:
        response = client.post("/api/generatePalettes", json={"promptText": "x", "paletteSize": 0})

    assert response.status_code == 422


def test_missing_credentials_is_a_server_error() -> None:
    with _client() as client:
        response = client.post("/api/generatePalettes", json={"promptText": "sunset"})

    assert response.status_code == 500
    assert "initialization failed" in response.json()["message"]


def test_missing_credentials_can_serve_fallbacks_with_warning() -> None:
    settings = _settings(serve_fallback_without_credentials=True)
    with _client(settings) as client:
        response = client.post("/api/generatePalettes", json={"promptText": "sunset"})

    assert response.status_code == 200
    data = response.json()
    assert data["warning"]
    assert len(data["palettes"]) == len(DEFAULT_MOODS)


def test_unhandled_errors_are_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    async def explode(self, request):
        raise RuntimeError("assembly exploded")

    monkeypatch.setattr(PaletteOrchestrator, "generate_palettes", explode)
    with _client(generator=FailingGenerator()) as client:
        response = client.post("/api/generatePalettes", json={"promptText": "sunset"})

    assert response.status_code == 500
    assert response.json() == {"message": "Failed to generate palettes", "error": "assembly exploded"}


def test_health_reports_cache_backend() -> None:
    with _client(generator=FailingGenerator()) as client:
        response = client.get("/api/health/")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["service"] == "Mood Palette Service"
    assert payload["cache"] == {"backend": "memory", "reachable": True}
