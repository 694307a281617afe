# routers/error_handlers.py
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from helpers.exceptions import SitemapError

logger = logging.getLogger("errors")


# ---------------------------------------------------------
# 404 / 403 / any StarletteHTTPException
# ---------------------------------------------------------
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


# ---------------------------------------------------------
# Generic Exception Handler (500)
# ---------------------------------------------------------
async def generic_exception_handler(request: Request, exc: Exception):
    if isinstance(exc, SitemapError):
        logger.error(f"⚠️ Sitemap generation failed for {request.url.path}: {exc}", exc_info=exc)
    else:
        logger.error(f"⚠️ Unhandled Server Error: {exc}", exc_info=exc)

    return PlainTextResponse("Internal Server Error", status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
