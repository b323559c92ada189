from assistant_core.config.settings import Settings


def test_api_key_aliases(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "from-api-key")
    assert Settings(_env_file=None).gemini_api_key == "from-api-key"
    monkeypatch.setenv("GEMINI_API_KEY", "from-gemini")
    assert Settings(_env_file=None).gemini_api_key == "from-gemini"


def test_blank_api_key_is_missing(monkeypatch):
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "   ")
    assert Settings(_env_file=None).gemini_api_key is None


def test_yaml_config_source(monkeypatch, tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("deep_thought_budget: 2048\nlog_dir: custom-logs\n", encoding="utf-8")
    monkeypatch.setenv("ASSISTANT_CONFIG_FILE", str(cfg))
    s = Settings(_env_file=None)
    assert s.deep_thought_budget == 2048
    assert s.log_dir == "custom-logs"
    assert s.http_timeout is None
