# review_scraper/api.py
import logging
import time

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from review_scraper.config import get_settings
from review_scraper.exceptions import ScraperError, SerializationFailure
from review_scraper.models import Category
from review_scraper import runner
from review_scraper.aggregate import aggregate
from review_scraper.output import load_bundles, serialize, write_bundle
from review_scraper.utils import is_tripadvisor_url

log = logging.getLogger("api")

app = FastAPI(title="TripAdvisor Review Scraper API", version="0.1.0")


class ScrapeRequest(BaseModel):
    url: str
    category: Category = Category.HOTEL
    name: str = ""
    id: str = ""
    position: int = 0


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "categories": [c.value for c in Category],
        "concurrency": get_settings().concurrency,
    }


@app.post("/scrape")
async def scrape(req: ScrapeRequest):
    if not is_tripadvisor_url(req.url, req.category):
        raise HTTPException(status_code=400, detail=f"Invalid {req.category.value} url: {req.url}")

    started = time.time()
    try:
        if req.category == Category.HOTEL:
            csv_text = await runner.start_hotel(req.url)
            log.info(f"Scraped {req.url} in {round(time.time() - started, 3)}s")
            return PlainTextResponse(csv_text, media_type="text/csv")
        bundle = await runner.start_restaurant(req.url, req.name, req.id, req.position)
    except ScraperError as e:
        raise HTTPException(status_code=502, detail=f"Scrape failed: {e}")

    write_bundle(bundle, get_settings().data_dir)
    log.info(f"Scraped {req.url} in {round(time.time() - started, 3)}s")
    return bundle.model_dump(mode="json")


@app.post("/combine")
async def combine():
    try:
        bundles = load_bundles(get_settings().data_dir)
    except ValueError as e:
        # malformed JSON or a file that is not a bundle
        raise HTTPException(status_code=500, detail=f"Invalid bundle file: {e}")
    try:
        csv_text = serialize(aggregate(bundles))
    except SerializationFailure as e:
        raise HTTPException(status_code=500, detail=f"Serialization failed: {e}")
    return PlainTextResponse(csv_text, media_type="text/csv")
