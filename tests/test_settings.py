from shadmanager.settings import Settings


def _clear_env(monkeypatch):
    import os

    for key in list(os.environ):
        if key.startswith("SHADMANAGER_"):
            monkeypatch.delenv(key, raising=False)


class TestSettings:
    def test_defaults(self, monkeypatch):
        _clear_env(monkeypatch)
        s = Settings(_env_file=None)
        assert s.pix_key == ""
        assert s.pix_merchant_name == "Shad Manager"
        assert s.pix_merchant_city == "Sao Paulo"
        assert s.pix_txid == "SHADMENSAL"
        assert s.membership_cache_ttl == 60
        assert s.log_level == "INFO"
        assert s.log_json is False

    def test_env_override(self, monkeypatch):
        _clear_env(monkeypatch)
        monkeypatch.setenv("SHADMANAGER_PIX_KEY", "financeiro@academia.com")
        monkeypatch.setenv("SHADMANAGER_MEMBERSHIP_CACHE_TTL", "5")
        monkeypatch.setenv("SHADMANAGER_LOG_JSON", "true")
        s = Settings(_env_file=None)
        assert s.pix_key == "financeiro@academia.com"
        assert s.membership_cache_ttl == 5
        assert s.log_json is True
