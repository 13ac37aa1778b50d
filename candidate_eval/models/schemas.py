from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional

# Request bodies keep the camelCase keys the front-end sends.


# -------- Evaluation --------
class VideoFrame(BaseModel):
    timestamp: Optional[float] = Field(default=None, allow_inf_nan=False)  # seconds from the start of the video
    data: str  # base64 jpeg


class EvaluationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_text: Optional[str] = Field(default=None, alias="jobText")
    resume_text: Optional[str] = Field(default=None, alias="resumeText")
    resume_pdf: Optional[str] = Field(default=None, alias="resumePDF")
    criteria: Optional[Any] = None  # sanitized by services.criteria
    video_frames: Optional[List[VideoFrame]] = Field(default=None, alias="videoFrames")
    video_transcript: Optional[str] = Field(default=None, alias="videoTranscript")


class VideoEvaluation(BaseModel):
    model_config = ConfigDict(extra="allow")

    appearance_score: Optional[float] = None
    communication_score: Optional[float] = None
    attitude_score: Optional[float] = None
    content_score: Optional[float] = None
    overall_impression: Optional[str] = None
    video_strengths: List[str] = []
    video_concerns: List[str] = []


class EvaluationResult(BaseModel):
    """Shape the model is asked to produce. Replies are passed through as-is."""
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    recommendation: Optional[Literal["A", "B", "C", "D"]] = None
    score: Optional[float] = None
    match_rate: Optional[float] = None
    experience_years: Optional[Any] = None
    matching_skills: List[str] = []
    missing_skills: List[str] = []
    qualifications: List[str] = []
    strengths: List[str] = []
    concerns: List[str] = []
    summary: Optional[str] = None
    video_evaluation: Optional[VideoEvaluation] = None


# -------- Summaries --------
class JobSummaryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_text: Optional[str] = Field(default=None, alias="jobText")


class TranscriptSummaryRequest(BaseModel):
    transcript: Optional[str] = None


class SummaryResponse(BaseModel):
    summary: str


# -------- Shares --------
class ShareCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    results: Optional[Any] = None
    file_urls: Optional[Dict[str, Any]] = Field(default=None, alias="fileUrls")
    title: Optional[Any] = None
    date: Optional[Any] = None


class ShareCreateResponse(BaseModel):
    id: str
    shareUrl: str


class ShareUploadRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filename: Optional[str] = None
    data: Optional[str] = None  # base64
    content_type: Optional[str] = Field(default=None, alias="contentType")


class ShareUploadResponse(BaseModel):
    url: str


class ErrorResponse(BaseModel):
    error: str
