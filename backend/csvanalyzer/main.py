"""
Contact CSV Analyzer — FastAPI application

Exposes the analyzer over HTTP:
- POST {API_PREFIX}/analyze: multipart upload (file, akid, locale)
- GET /health: liveness and version
"""

import logging

from fastapi import FastAPI

from .api import analyze_router
from .core.config import settings
from .middleware import ErrorHandlerMiddleware, RequestLoggerMiddleware

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("csvanalyzer")

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Dialect sniffing and column type inference for contact CSV imports",
    debug=settings.DEBUG,
)

# The last middleware added runs outermost, so request logging also sees error responses
app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(RequestLoggerMiddleware)

app.include_router(analyze_router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": settings.APP_VERSION}


def run():
    import uvicorn

    uvicorn.run("csvanalyzer.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
