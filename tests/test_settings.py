from app.config.settings import Settings


def test_comma_separated_lists_from_env(monkeypatch):
    monkeypatch.setenv("ADMIN_ROLES", "super_admin, teacher")
    monkeypatch.setenv("BACKEND_CORS_ORIGINS", "https://a.example,https://b.example")

    settings = Settings(_env_file=None)

    assert settings.ADMIN_ROLES == ["super_admin", "teacher"]
    assert settings.CORS_ORIGINS == ["https://a.example", "https://b.example"]


def test_json_lists_from_env(monkeypatch):
    monkeypatch.setenv("ADMIN_ROLES", '["super_admin"]')

    assert Settings(_env_file=None).ADMIN_ROLES == ["super_admin"]


def test_log_level_is_upper_cased(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert Settings(_env_file=None).LOG_LEVEL == "DEBUG"
