from fastapi import APIRouter, Depends, Request, Response

from candidate_eval.dependencies import get_anthropic_client
from candidate_eval.models.schemas import ErrorResponse, EvaluationRequest, EvaluationResult
from candidate_eval.services.anthropic_client import AnthropicClient
from candidate_eval.services.evaluation import evaluate_candidate
from candidate_eval.utils.config import Settings, get_settings
from candidate_eval.utils.logging_config import get_logger, PerformanceMonitor

router = APIRouter()
logger = get_logger(__name__)


@router.options("/evaluate", include_in_schema=False)
async def evaluate_preflight():
    return Response(status_code=200)


@router.post(
    "/evaluate",
    responses={200: {"model": EvaluationResult}, 400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def evaluate(
    req: EvaluationRequest,
    request: Request,
    client: AnthropicClient = Depends(get_anthropic_client),
    settings: Settings = Depends(get_settings),
):
    """Evaluate an applicant's documents against a job posting"""
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.info("Evaluation requested", extra={"request_id": request_id})

    with PerformanceMonitor("evaluate_candidate", logger, threshold_ms=60000):
        result = await evaluate_candidate(req, client, settings)

    logger.info(
        f"Evaluation completed: recommendation={result.get('recommendation')}",
        extra={"request_id": request_id}
    )
    # Returned as parsed; consumers tolerate missing or extra fields
    return result
