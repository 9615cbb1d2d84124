# review_scraper/utils.py
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union
import csv
import json
import re

from review_scraper.models import Category, ScrapeTarget

_REVIEW_URL = {
    Category.HOTEL: re.compile(r"^https://www\.tripadvisor\.[a-z.]{2,8}/Hotel_Review-g\d+-d\d+-Reviews-"),
    Category.RESTAURANT: re.compile(r"^https://www\.tripadvisor\.[a-z.]{2,8}/Restaurant_Review-g\d+-d\d+-Reviews-"),
}
_ENTITY_ID = re.compile(r"-d(\d+)-")


def safe_filename(s: str) -> str:
    return re.sub(r'[^A-Za-z0-9\-_\.]+', '_', s).strip('_')


def iso_now():
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def ensure_dir(path: Union[str, Path]) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def is_tripadvisor_url(url: str, category: Category) -> bool:
    return bool(_REVIEW_URL[Category(category)].match(url or ""))


def entity_slug(url: str) -> str:
    '''
    Name segment of a review url:
    .../Hotel_Review-g188107-d231860-Reviews-Beau_Rivage_Palace-Lausanne.html -> Beau_Rivage_Palace
    '''
    parts = url.split("-")
    if "Reviews" in parts:
        for seg in parts[parts.index("Reviews") + 1:]:
            if not re.fullmatch(r"or\d*", seg):
                return safe_filename(seg)
    return safe_filename(url.rsplit("/", 1)[-1]) or "entity"


def entity_id_from_url(url: str) -> Optional[str]:
    m = _ENTITY_ID.search(url)
    return m.group(1) if m else None


def load_targets(path: Union[str, Path], category: Category) -> List[ScrapeTarget]:
    '''
    Seed list from a CSV file (header: url,name,id[,position]) or a JSON list of
    objects with the same keys. Missing position falls back to the row index.
    '''
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() == ".json":
        rows = json.loads(text)
    else:
        rows = list(csv.DictReader(text.splitlines()))
    targets = []
    for i, row in enumerate(rows):
        url = (row.get("url") or "").strip()
        if not url:
            raise ValueError(f"{p}: row {i} has no url")
        position = row.get("position")
        targets.append(ScrapeTarget(
            url=url,
            name=row.get("name") or entity_slug(url),
            id=str(row.get("id") or entity_id_from_url(url) or ""),
            position=int(position) if position not in (None, "") else i,
            category=category,
        ))
    return targets
