from review_scraper.config import Settings, get_settings
from review_scraper.models import Category


def test_defaults():
    s = Settings(_env_file=None)
    assert s.headless is True
    assert s.concurrency == 2
    assert (s.viewport_width, s.viewport_height) == (1920, 1080)


def test_env_overrides(mock_env, monkeypatch):
    monkeypatch.setenv("HEADLESS", "false")
    s = get_settings()
    assert s.headless is False
    assert s.concurrency == 3
    assert s.data_dir.endswith("data")


def test_page_sizes_per_category():
    assert Category.HOTEL.page_size == 10
    assert Category.RESTAURANT.page_size == 15
