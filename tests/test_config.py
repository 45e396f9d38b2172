"""Tests for configuration loading."""

from autotex.config import DEFAULT_MODELS, Settings, get_settings


class TestSettings:
    """Test Settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        """Defaults match a stock local Ollama install."""
        monkeypatch.delenv("OLLAMA_BASE_URL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.ollama_base_url == "http://localhost:11434"
        assert settings.ollama_model == "llama3.2"
        assert settings.ollama_generate_timeout is None
        assert settings.download_filename == "document.tex"
        assert settings.default_models == DEFAULT_MODELS

    def test_env_overrides(self, monkeypatch):
        """Environment variables override defaults."""
        monkeypatch.setenv("OLLAMA_BASE_URL", "http://gpu-box:11434/")
        monkeypatch.setenv("OLLAMA_TEMPERATURE", "0.1")
        monkeypatch.setenv("OLLAMA_FALLBACK_MODELS", "qwen2.5, phi3")

        settings = Settings(_env_file=None)

        assert settings.ollama_base_url == "http://gpu-box:11434"
        assert settings.ollama_temperature == 0.1
        assert settings.ollama_fallback_models == ["qwen2.5", "phi3"]

    def test_fallback_models_as_json(self, monkeypatch):
        """A JSON list is accepted too."""
        monkeypatch.setenv("OLLAMA_FALLBACK_MODELS", '["gemma2", "phi3"]')

        assert Settings(_env_file=None).ollama_fallback_models == ["gemma2", "phi3"]

    def test_default_model_always_selectable(self):
        """The configured model is part of the fallback set."""
        settings = Settings(_env_file=None, ollama_model="qwen2.5", ollama_fallback_models=["phi3"])

        assert settings.default_models == ["qwen2.5", "phi3"]

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_log_level_is_upper_cased(self, monkeypatch):
        """A lower-case LOG_LEVEL is usable by logging.basicConfig."""
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert Settings(_env_file=None).log_level == "DEBUG"
