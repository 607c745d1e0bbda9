from snapdish.config import Settings
from snapdish.constants import MIN_INGREDIENTS


def test_defaults():
    settings = Settings()
    assert settings.server_base_url == "http://127.0.0.1:3000"
    assert settings.poll_interval == 10.0
    assert settings.min_ingredients == MIN_INGREDIENTS
    assert settings.host_only_generation is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SNAPDISH_SERVER_BASE_URL", "http://192.168.0.10:3000")
    monkeypatch.setenv("SNAPDISH_HOST_ONLY_GENERATION", "true")
    monkeypatch.setenv("SNAPDISH_MIN_INGREDIENTS", "5")
    settings = Settings()
    assert settings.server_base_url == "http://192.168.0.10:3000"

    rules = settings.rules()
    assert rules.host_only_generation is True
    assert rules.min_ingredients == 5
