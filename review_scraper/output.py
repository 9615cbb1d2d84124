# review_scraper/output.py
import csv
import io
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from review_scraper.aggregate import aggregate
from review_scraper.exceptions import SerializationFailure
from review_scraper.models import EntityBundle, NormalizedReviewRecord
from review_scraper.utils import ensure_dir, entity_slug

log = logging.getLogger("output")

Row = Union[NormalizedReviewRecord, Mapping[str, Any]]


def _as_row(record: Row) -> Dict[str, Any]:
    if isinstance(record, NormalizedReviewRecord):
        return record.as_row()
    return dict(record)


def serialize(records: Sequence[Row], columns: Optional[Sequence[str]] = None) -> str:
    '''
    CSV text for a batch of records. The columns are the keys of the FIRST
    record: keys that only later records have are dropped, keys a later record
    lacks are written as empty cells.

    With no records the header comes from `columns`; without those there is
    nothing to derive columns from and SerializationFailure is raised.
    '''
    rows = [_as_row(r) for r in records]
    if rows:
        fieldnames = list(rows[0].keys())
    elif columns:
        fieldnames = list(columns)
    else:
        raise SerializationFailure("no records to serialize: cannot derive columns")
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=fieldnames, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buf.getvalue()


def write_csv(text: str, path: Union[str, Path]) -> str:
    p = Path(path)
    ensure_dir(p.parent)
    with open(p, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    return str(p)


def bundle_filename(bundle: EntityBundle) -> str:
    return f"{bundle.position}_{entity_slug(bundle.seed_url)}.json"


def write_bundle(bundle: EntityBundle, data_dir: Union[str, Path]) -> str:
    path = ensure_dir(data_dir) / bundle_filename(bundle)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(bundle.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
    return str(path)


def load_bundles(data_dir: Union[str, Path]) -> List[EntityBundle]:
    bundles = []
    for path in sorted(Path(data_dir).glob("*.json")):
        with open(path, encoding="utf-8") as f:
            bundles.append(EntityBundle.model_validate(json.load(f)))
    return bundles


def combine(data_dir: Union[str, Path], out_path: Union[str, Path]) -> Tuple[str, int]:
    bundles = load_bundles(data_dir)
    log.info(f"Combining {len(bundles)} bundle(s) from {data_dir}")
    records = aggregate(bundles)
    path = write_csv(serialize(records), out_path)
    return path, len(records)
