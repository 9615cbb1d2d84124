# review_scraper/pagination.py
"""Review page arithmetic and offset-token URL generation.

TripAdvisor encodes the item offset of a review page in the URL as
``-or<digits>`` (``...-Reviews-or20-Some_Hotel...``). The first page usually
carries no token at all, the second page carries ``-or<page_size>``.
"""
import re
from typing import List, Optional

from review_scraper.models import PaginationPlan

OFFSET_TOKEN = re.compile(r"-or[0-9]*")
_OFFSET_DIGITS = re.compile(r"-or([0-9]+)")


def page_count(total_review_count: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if total_review_count < 0:
        raise ValueError(f"total_review_count must be >= 0, got {total_review_count}")
    q, r = divmod(total_review_count, page_size)
    return q if r == 0 else q + 1


def with_offset(url: str, offset: int) -> str:
    return OFFSET_TOKEN.sub(f"-or{offset}", url)


def offset_of(url: str) -> int:
    m = _OFFSET_DIGITS.search(url)
    return int(m.group(1)) if m else 0


def build_page_urls(seed_url: str, second_page_url: Optional[str], page_size: int, page_count: int) -> List[str]:
    '''
    Ordered review page urls for one entity: the seed, the discovered second
    page, then the second page re-written with offsets 2*page_size ... up to
    (page_count-1)*page_size. No second page means a single page, whatever
    page_count says.
    '''
    if not second_page_url:
        return [seed_url]
    urls = [seed_url]
    for k in range(1, page_count):
        urls.append(with_offset(second_page_url, k * page_size))
    return urls


def plan_pages(seed_url: str, second_page_url: Optional[str], page_size: int, total_review_count: int) -> PaginationPlan:
    pages = page_count(total_review_count, page_size)
    return PaginationPlan(page_urls=build_page_urls(seed_url, second_page_url, page_size, pages))
