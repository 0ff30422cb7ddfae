import os


def get_settings_module() -> str:
    """Pick the settings module from APP_ENV (defaults to development)."""
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "workforce_engine.config.production"

    if env in {"test", "testing"}:
        return "workforce_engine.config.testing"

    return "workforce_engine.config.development"
