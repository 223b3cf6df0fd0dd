"""JSON-encoded BOM and VEX upload routes."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request

from app.core.config import PayloadSettings
from app.core.config import get_payload_settings
from app.deserialization.reader import read_payload
from app.schemas.submission import BomSubmitRequest
from app.schemas.submission import SubmissionToken
from app.schemas.submission import VexSubmitRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["submissions"])


async def read_bom_submission(
    request: Request,
    settings: PayloadSettings = Depends(get_payload_settings),
) -> BomSubmitRequest:
    """Map the request body into a BOM submission."""
    return read_payload(await request.body(), BomSubmitRequest, settings=settings)


async def read_vex_submission(
    request: Request,
    settings: PayloadSettings = Depends(get_payload_settings),
) -> VexSubmitRequest:
    """Map the request body into a VEX submission."""
    return read_payload(await request.body(), VexSubmitRequest, settings=settings)


@router.put("/bom", response_model=SubmissionToken)
def upload_bom_endpoint(payload: BomSubmitRequest = Depends(read_bom_submission)) -> SubmissionToken:
    """Accept a Base64 encoded BOM."""
    token = SubmissionToken(token=uuid.uuid4())
    logger.info("Accepted BOM upload for project=%s token=%s", payload.project or payload.project_name, token.token)
    return token


@router.put("/vex", response_model=SubmissionToken)
def upload_vex_endpoint(payload: VexSubmitRequest = Depends(read_vex_submission)) -> SubmissionToken:
    """Accept a Base64 encoded VEX document."""
    token = SubmissionToken(token=uuid.uuid4())
    logger.info("Accepted VEX upload for project=%s token=%s", payload.project or payload.project_name, token.token)
    return token
