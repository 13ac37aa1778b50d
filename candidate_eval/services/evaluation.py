from typing import Any, Dict

from candidate_eval.helpers.prompts import (
    RESUME_PLACEHOLDER,
    PromptInputs,
    build_evaluation_prompt,
    build_job_summary_prompt,
    build_transcript_summary_prompt,
)
from candidate_eval.models.schemas import EvaluationRequest
from candidate_eval.services.anthropic_client import AnthropicClient, message_text
from candidate_eval.services.criteria import rank_criteria
from candidate_eval.services.payload import build_message_content, select_max_tokens
from candidate_eval.utils.config import Settings
from candidate_eval.utils.exceptions import ValidationError
from candidate_eval.utils.logging_config import get_logger
from candidate_eval.utils.utils import extract_json_object, truncate_text

logger = get_logger(__name__)


def validate_evaluation_request(req: EvaluationRequest) -> None:
    if not req.job_text or not (req.resume_text or req.resume_pdf):
        raise ValidationError("Missing jobText or resumeText")


def build_prompt_inputs(req: EvaluationRequest, settings: Settings) -> PromptInputs:
    has_video = bool(req.video_frames)
    return PromptInputs(
        job_text=truncate_text(req.job_text, settings.max_text_length),
        resume_text=truncate_text(req.resume_text, settings.max_text_length) if req.resume_text else RESUME_PLACEHOLDER,
        evaluation_points=rank_criteria(req.criteria),
        has_video=has_video,
        has_pdf=bool(req.resume_pdf),
        transcript=truncate_text(req.video_transcript, settings.max_transcript_length) if req.video_transcript else "",
    )


async def evaluate_candidate(req: EvaluationRequest, client: AnthropicClient, settings: Settings) -> Dict[str, Any]:
    validate_evaluation_request(req)

    inputs = build_prompt_inputs(req, settings)
    prompt = build_evaluation_prompt(inputs)
    content = build_message_content(
        prompt,
        pdf_data=req.resume_pdf,
        frames=req.video_frames,
        max_frames=settings.max_video_frames,
        max_frames_with_pdf=settings.max_video_frames_with_pdf,
    )
    max_tokens = select_max_tokens(content, settings.text_max_tokens, settings.multimodal_max_tokens)

    logger.info(
        f"Evaluating candidate (pdf={inputs.has_pdf}, frames={len(req.video_frames or [])}, "
        f"multimodal={content.is_multimodal}, max_tokens={max_tokens})"
    )
    data = await client.create_message(content.to_api(), max_tokens)
    return extract_json_object(message_text(data))


async def summarize_job(job_text: str, client: AnthropicClient, settings: Settings) -> str:
    prompt = build_job_summary_prompt(truncate_text(job_text, settings.max_text_length))
    data = await client.create_message(prompt, settings.job_summary_max_tokens)
    return message_text(data).strip()


async def summarize_transcript(transcript: str, client: AnthropicClient, settings: Settings) -> str:
    prompt = build_transcript_summary_prompt(truncate_text(transcript, settings.max_summary_transcript_length))
    data = await client.create_message(prompt, settings.transcript_summary_max_tokens)
    return message_text(data).strip()
