"""
Analyze API

Accepts a contact CSV upload and returns the detected format, column
mapping and preview. Analysis failures are part of the normal response
(status 200 with an Error code); only malformed requests get 4xx.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from ..core.config import settings
from ..services.analyzer import CsvAnalyzer
from ..services.properties import PostgresPropertySource

logger = logging.getLogger("csvanalyzer.api.analyze")

router = APIRouter(tags=["Analyze"])


@lru_cache()
def get_analyzer() -> CsvAnalyzer:
    """Analyzer wired to the contact metadata database when one is configured."""
    db = settings.db_settings()
    if db is None:
        logger.info("No PGHOST/PGDATABASE/PGUSER configured, analyzing without contact properties")
        return CsvAnalyzer(settings)
    return CsvAnalyzer(settings, PostgresPropertySource(db, timeout=settings.DB_CONNECT_TIMEOUT))


@router.post("/analyze")
async def analyze_upload(
    file: UploadFile = File(...),
    akid: Optional[int] = Form(None),
    locale: str = Form(settings.DEFAULT_LOCALE),
    analyzer: CsvAnalyzer = Depends(get_analyzer),
) -> Dict[str, Any]:
    """
    Analyze an uploaded CSV file.

    The analysis is synchronous and bounded (one sample read plus an
    optional metadata lookup), so it runs in the thread pool.
    """
    logger.debug("Analyzing upload %s for account %s", file.filename, akid)
    try:
        result = await run_in_threadpool(analyzer.analyze, file.file, locale, akid)
    finally:
        await file.close()
    return result.to_dict()
