"""Config tests."""

from shiprate.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        s = Settings()
        assert s.app_name == "ShipRate-Cache"
        assert s.debug is False
        assert s.cache_enabled is True
        assert s.multi_quote_enabled is False

    def test_get_settings_cached(self):
        s1 = get_settings()
        s2 = get_settings()
        assert s1 is s2  # lru_cache

    def test_cache_defaults(self):
        s = Settings()
        assert s.cache_backend == "memory"
        assert s.redis_url.startswith("redis://")
        assert s.cache_key_prefix == "shiprate:"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("ORIGIN_POSTCODE", "04538-132")
        monkeypatch.setenv("MULTI_QUOTE_ENABLED", "true")
        s = Settings()
        assert s.origin_postcode == "04538-132"
        assert s.multi_quote_enabled is True
