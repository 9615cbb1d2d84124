import pytest

from review_scraper.config import Settings, get_settings


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=str(tmp_path / "data"),
        output_file=str(tmp_path / "outputs" / "reviews.csv"),
        concurrency=2,
        _env_file=None,
    )


@pytest.fixture
def mock_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("OUTPUT_FILE", str(tmp_path / "outputs" / "reviews.csv"))
    monkeypatch.setenv("CONCURRENCY", "3")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
