from fastapi import APIRouter, Depends, Response

from candidate_eval.dependencies import get_anthropic_client
from candidate_eval.models.schemas import JobSummaryRequest, SummaryResponse, TranscriptSummaryRequest
from candidate_eval.services.anthropic_client import AnthropicClient
from candidate_eval.services.evaluation import summarize_job, summarize_transcript
from candidate_eval.utils.config import Settings, get_settings
from candidate_eval.utils.exceptions import ValidationError
from candidate_eval.utils.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.options("/summarize", include_in_schema=False)
@router.options("/summarize-transcript", include_in_schema=False)
async def summarize_preflight():
    return Response(status_code=200)


@router.post("/summarize", response_model=SummaryResponse)
async def summarize(
    req: JobSummaryRequest,
    client: AnthropicClient = Depends(get_anthropic_client),
    settings: Settings = Depends(get_settings),
):
    """One-line summary of a job posting"""
    if not req.job_text:
        raise ValidationError("Missing jobText", field="jobText")
    summary = await summarize_job(req.job_text, client, settings)
    logger.info(f"Job summary generated ({len(summary)} chars)")
    return SummaryResponse(summary=summary)


@router.post("/summarize-transcript", response_model=SummaryResponse)
async def summarize_transcript_endpoint(
    req: TranscriptSummaryRequest,
    client: AnthropicClient = Depends(get_anthropic_client),
    settings: Settings = Depends(get_settings),
):
    """Summary of an interview video transcript"""
    if not req.transcript:
        raise ValidationError("Missing transcript", field="transcript")
    summary = await summarize_transcript(req.transcript, client, settings)
    logger.info(f"Transcript summary generated ({len(summary)} chars)")
    return SummaryResponse(summary=summary)
