from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from readflow.ingestion import IngestionError, IngestionPipeline, IngestKind, NormalizedDocument, ReadingContent

from api.dependencies import get_pipeline, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


class PasteRequest(BaseModel):
    text: str


class UrlRequest(BaseModel):
    url: str


def _serialize(content: ReadingContent) -> dict:
    payload = {
        "id": content.id,
        "title": content.title,
        "source": content.source.value,
        "word_count": content.word_count,
        "words": list(content.tokens),
    }
    if content.url is not None:
        payload["url"] = content.url
    if content.content is not None:
        payload["content"] = content.content
    return payload


async def _prepare(pipeline: IngestionPipeline, document: NormalizedDocument) -> dict:
    content = await pipeline.prepare(document)
    return _serialize(content)


@router.post("/paste")
async def paste_document(req: PasteRequest, pipeline: IngestionPipeline = Depends(get_pipeline)):
    try:
        document = await pipeline.ingest(IngestKind.PASTE, req.text)
    except IngestionError as exc:
        raise to_http_exception(exc) from exc
    return await _prepare(pipeline, document)


@router.post("/url")
async def url_document(req: UrlRequest, pipeline: IngestionPipeline = Depends(get_pipeline)):
    try:
        document = await pipeline.ingest(IngestKind.URL, req.url)
    except IngestionError as exc:
        logger.info("URL ingestion failed for %s: %s", req.url, exc.kind.value)
        raise to_http_exception(exc) from exc
    return await _prepare(pipeline, document)


@router.post("/upload")
async def upload_document(
    file: UploadFile = File(...),
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    payload = await file.read()
    if not payload:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    try:
        document = await pipeline.ingest_file(file.filename or "", payload)
    except IngestionError as exc:
        logger.info("Upload %s rejected: %s", file.filename, exc.kind.value)
        raise to_http_exception(exc) from exc
    return await _prepare(pipeline, document)
