import pytest
from pydantic import ValidationError

from driver_matching.settings import (
    CORSSettings,
    MatchingSettings,
    ServiceSettings,
    Settings,
    get_settings,
)


@pytest.mark.unit
class TestMatchingSettings:
    def test_defaults(self):
        settings = MatchingSettings()
        assert settings.index_precision == 6
        assert settings.search_precisions == [5, 4, 3]
        assert settings.min_candidates == 3
        assert settings.average_speed_kmh == 40.0
        assert settings.radius_widening_factor == 2
        assert settings.default_max_drivers == 5
        assert settings.max_drivers_limit == 20

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("MATCHING_INDEX_PRECISION", "7")
        monkeypatch.setenv("MATCHING_MIN_CANDIDATES", "5")
        monkeypatch.setenv("MATCHING_AVERAGE_SPEED_KMH", "30")

        settings = MatchingSettings()
        assert settings.index_precision == 7
        assert settings.min_candidates == 5
        assert settings.average_speed_kmh == 30.0

    def test_search_precisions_from_env(self, monkeypatch):
        monkeypatch.setenv("MATCHING_SEARCH_PRECISIONS", "[6,4,2]")
        assert MatchingSettings().search_precisions == [6, 4, 2]

    def test_index_precision_bounds(self):
        with pytest.raises(ValidationError):
            MatchingSettings(index_precision=0)

        with pytest.raises(ValidationError):
            MatchingSettings(index_precision=9)

    def test_search_precisions_validation(self):
        with pytest.raises(ValidationError):
            MatchingSettings(search_precisions=[])

        with pytest.raises(ValidationError):
            MatchingSettings(search_precisions=[5, 9])

        with pytest.raises(ValidationError):
            MatchingSettings(search_precisions=[3, 4, 5])

        with pytest.raises(ValidationError):
            MatchingSettings(search_precisions=[5, 5, 3])

    def test_single_precision_ladder(self):
        assert MatchingSettings(search_precisions=[4]).search_precisions == [4]

    def test_speed_must_be_positive(self):
        with pytest.raises(ValidationError):
            MatchingSettings(average_speed_kmh=0)


@pytest.mark.unit
class TestServiceSettings:
    def test_defaults(self):
        settings = ServiceSettings()
        assert settings.log_level == "INFO"
        assert settings.log_format == "text"
        assert settings.host == "0.0.0.0"
        assert settings.port == 8080

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SERVICE_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("SERVICE_LOG_FORMAT", "json")
        monkeypatch.setenv("SERVICE_PORT", "9000")

        settings = ServiceSettings()
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"
        assert settings.port == 9000

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            ServiceSettings(log_level="TRACE")


@pytest.mark.unit
class TestSettings:
    def test_composes_sections(self):
        settings = Settings()
        assert isinstance(settings.matching, MatchingSettings)
        assert isinstance(settings.service, ServiceSettings)
        assert isinstance(settings.cors, CORSSettings)

    def test_get_settings_reads_environment(self, monkeypatch):
        monkeypatch.setenv("MATCHING_MIN_CANDIDATES", "4")
        monkeypatch.setenv("CORS_ORIGINS", "http://example.test")

        settings = get_settings()
        assert settings.matching.min_candidates == 4
        assert settings.cors.origins == "http://example.test"
