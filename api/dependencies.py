from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from readflow.config import ReaderConfig
from readflow.ingestion import ErrorKind, IngestionError, IngestionPipeline

STATUS_BY_KIND = {
    ErrorKind.INVALID_FORMAT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BLOCKED: 403,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.NO_CONTENT: 422,
    ErrorKind.NETWORK_ERROR: 502,
}


@lru_cache(maxsize=1)
def get_config() -> ReaderConfig:
    return ReaderConfig.from_env()


@lru_cache(maxsize=1)
def get_pipeline() -> IngestionPipeline:
    return IngestionPipeline(config=get_config().ingestion)


def to_http_exception(exc: IngestionError) -> HTTPException:
    return HTTPException(
        status_code=STATUS_BY_KIND.get(exc.kind, 400),
        detail={"kind": exc.kind.value, "message": exc.message},
    )
