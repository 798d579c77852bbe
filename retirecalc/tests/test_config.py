from retirecalc.config import DEFAULT_CORS_ORIGINS, Settings


def test_from_env_reads_relay_settings(monkeypatch):
    monkeypatch.setenv("ORTTO_API_KEY", "abc")
    monkeypatch.setenv("ORTTO_ENDPOINT", "https://crm.example.test")
    monkeypatch.setenv("RELAY_TIMEOUT", "7.5")
    monkeypatch.setenv("CORS_ORIGINS", "https://calc.example.test, http://localhost:5173")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.relay_configured
    assert settings.relay_timeout == 7.5
    assert settings.cors_origins == ["https://calc.example.test", "http://localhost:5173"]
    assert settings.log_level == "DEBUG"


def test_from_env_defaults(monkeypatch):
    for name in ("ORTTO_API_KEY", "ORTTO_ENDPOINT", "RELAY_TIMEOUT", "CORS_ORIGINS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.relay_timeout is None
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS
    assert settings.log_level == "INFO"
    assert settings.missing_relay_settings() == {"ORTTO_API_KEY": True, "ORTTO_ENDPOINT": True}
    assert not settings.relay_configured


def test_blank_values_count_as_missing(monkeypatch):
    monkeypatch.setenv("ORTTO_API_KEY", "")
    monkeypatch.setenv("ORTTO_ENDPOINT", "https://crm.example.test")

    settings = Settings.from_env()

    assert settings.missing_relay_settings() == {"ORTTO_API_KEY": True, "ORTTO_ENDPOINT": False}


def test_unknown_log_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    assert Settings.from_env().log_level == "INFO"
    assert Settings(log_level="warning").log_level == "WARNING"


def test_app_starts_with_unknown_log_level():
    from retirecalc.app import create_app

    app = create_app(Settings(log_level="verbose"))
    assert app.config["SETTINGS"].log_level == "INFO"
