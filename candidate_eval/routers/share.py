import base64
import binascii
import json
import math
import re
import secrets
from typing import Any, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request, Response

from candidate_eval.dependencies import get_blob_storage
from candidate_eval.models.schemas import (
    ShareCreateRequest,
    ShareCreateResponse,
    ShareUploadRequest,
    ShareUploadResponse,
)
from candidate_eval.services.blob_storage import BlobStorageClient
from candidate_eval.utils.exceptions import NotFoundError, ValidationError
from candidate_eval.utils.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)

SHARE_ID_PATTERN = re.compile(r"[a-f0-9]{8}")


def new_share_id() -> str:
    """8 lowercase hex characters, the format share-get accepts."""
    return secrets.token_hex(4)


def share_pathname(share_id: str) -> str:
    return f"s/{share_id}.json"


def results_missing(results: Any) -> bool:
    """Empty objects and lists are valid results. null, "", 0, false and NaN are not."""
    if isinstance(results, (dict, list)):
        return False
    if isinstance(results, float) and math.isnan(results):
        return True
    return not results


@router.options("/share-create", include_in_schema=False)
@router.options("/share-get", include_in_schema=False)
@router.options("/share-upload", include_in_schema=False)
async def share_preflight():
    return Response(status_code=200)


@router.post("/share-create", response_model=ShareCreateResponse)
async def create_share(req: ShareCreateRequest, request: Request, storage: BlobStorageClient = Depends(get_blob_storage)):
    """Store evaluation results so they can be opened later by share id"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    if results_missing(req.results):
        raise ValidationError("Missing results", field="results", value=req.results)

    share_id = new_share_id()
    share_data = {"results": req.results, "fileUrls": req.file_urls or {}}
    # title and date are stored only when the client sent them
    for key in ("title", "date"):
        if key in req.model_fields_set:
            share_data[key] = getattr(req, key)
    blob = await storage.put(
        share_pathname(share_id),
        json.dumps(share_data, ensure_ascii=False).encode("utf-8"),
        content_type="application/json",
        add_random_suffix=False,
    )
    logger.info(f"Share created: {share_id}", extra={"request_id": request_id})
    return ShareCreateResponse(id=share_id, shareUrl=blob["url"])


@router.get("/share-get")
async def get_share(
    request: Request,
    id: Optional[str] = Query(default=None),
    storage: BlobStorageClient = Depends(get_blob_storage),
):
    """Fetch stored share data by id"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    if not id or not SHARE_ID_PATTERN.fullmatch(id):
        raise ValidationError("Invalid share ID", field="id", value=id)

    blobs = await storage.find_by_prefix(share_pathname(id), limit=1)
    if not blobs:
        logger.warning(f"Share not found: {id}", extra={"request_id": request_id})
        raise NotFoundError("Share not found", resource=id)

    return await storage.fetch_json(blobs[0]["url"])


@router.post("/share-upload", response_model=ShareUploadResponse)
async def upload_share_asset(req: ShareUploadRequest, request: Request, storage: BlobStorageClient = Depends(get_blob_storage)):
    """Upload a file (resume PDF, video thumbnail, ...) referenced by a share"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    if not req.filename or not req.data:
        raise ValidationError("Missing filename or data")

    try:
        payload = base64.b64decode(req.data)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Invalid base64 data", field="data", cause=e) from e

    blob = await storage.put(
        quote(req.filename, safe="!'()*"),
        payload,
        content_type=req.content_type or "application/octet-stream",
        add_random_suffix=True,
    )
    logger.info(f"Share asset uploaded: {req.filename} ({len(payload)} bytes)", extra={"request_id": request_id})
    return ShareUploadResponse(url=blob["url"])
