# review_scraper/exceptions.py
from typing import Optional


class ScraperError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NavigationFailure(ScraperError):
    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"{message} ({url})")


class MetadataParseFailure(ScraperError):
    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"{message} ({url})")


class ExtractionFailure(ScraperError):
    def __init__(self, message: str, field: Optional[str] = None, index: Optional[int] = None):
        self.field = field
        self.index = index
        super().__init__(message)


class SerializationFailure(ScraperError):
    pass
