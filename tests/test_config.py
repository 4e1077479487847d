import pytest
from pydantic import ValidationError

from veto_city.config import Settings


def test_defaults():
    settings = Settings()
    assert settings.MAX_SEASON_CHAIN_DEPTH == 20
    assert (settings.RECORDS_WEEK_MIN, settings.RECORDS_WEEK_MAX) == (1, 14)


@pytest.mark.parametrize("field", ["MAX_SEASON_CHAIN_DEPTH", "MAX_CONCURRENT_REQUESTS"])
def test_zero_is_rejected(field):
    with pytest.raises(ValidationError):
        Settings(**{field: 0})


def test_chain_depth_from_environment(monkeypatch):
    monkeypatch.setenv("MAX_SEASON_CHAIN_DEPTH", "0")
    with pytest.raises(ValidationError):
        Settings()

    monkeypatch.setenv("MAX_SEASON_CHAIN_DEPTH", "3")
    assert Settings().MAX_SEASON_CHAIN_DEPTH == 3


def test_cors_origins_are_split():
    settings = Settings(CORS_ORIGINS_STR=" http://a.test , ,http://b.test")
    assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]
