"""
Prompt text for the evaluation and summary endpoints.

The evaluation prompt is assembled from independent sections; each optional
section is produced by its own function and only included when its flag is
set, so no section depends on another's punctuation.
"""
from dataclasses import dataclass
from typing import List

RESUME_PLACEHOLDER = "(No text extraction available. Refer to the attached PDF document.)"

SECTION_SEPARATOR = "\n\n"


@dataclass
class PromptInputs:
    job_text: str
    resume_text: str
    evaluation_points: str
    has_video: bool = False
    has_pdf: bool = False
    transcript: str = ""


def intro_section() -> str:
    return (
        "You are an assistant to a hiring manager.\n"
        "Compare the job posting with the applicant's documents and evaluate "
        "whether this applicant matches the position's requirements."
    )


def job_section(job_text: str) -> str:
    return f"[Job Posting]\n{job_text}"


def documents_section(resume_text: str) -> str:
    return f"[Applicant Documents (resume / work history)]\n{resume_text}"


def pdf_guidance_section() -> str:
    return (
        "[About the Attached PDF]\n"
        "The applicant's original PDF is attached. The text above was extracted "
        "automatically and may be garbled, reordered or incomplete. When the two "
        "disagree, trust the content of the PDF."
    )


def missing_fields_caution_section() -> str:
    return (
        "[Caution]\n"
        "Form fields that appear empty in the extracted text may simply have been "
        "lost during extraction. Do not treat a field as left blank unless the PDF "
        "confirms it."
    )


def criteria_section(evaluation_points: str) -> str:
    return (
        "[Evaluation Points (in order of importance)]\n"
        f"{evaluation_points}\n\n"
        "Weight the score and match rate according to the importance of each point above.\n"
        "Points marked \"top priority\" should have the largest effect on the evaluation, "
        "and points marked \"reference only\" only a minor one."
    )


def video_section(transcript: str) -> str:
    lines = ["[Interview Video]"]
    if transcript:
        lines.append(f"[Transcript]\n{transcript}")
    lines.append(
        "[Video Frames]\n"
        "The images below are frames sampled at regular intervals from an interview "
        "or self-introduction video."
    )
    lines.append(
        "[Video Evaluation Points]\n"
        "Additionally evaluate the following from the video:\n"
        "1. Appropriateness of appearance and grooming\n"
        "2. Expression and attitude (brightness, sincerity, confidence)\n"
        "3. Communication skills (clarity and logic of speech)\n"
        "4. Content and persuasiveness of the motivation / self-introduction\n"
        "5. Overall impression and potential"
    )
    return "\n".join(lines)


BASE_SCHEMA_FIELDS = [
    '"name": "applicant name (\\"unknown\\" if not found)"',
    '"recommendation": "A / B / C / D"',
    '"score": number from 1-100',
    '"match_rate": number from 1-100 (match with the job requirements)',
    '"experience_years": "relevant years of experience (estimated)"',
    '"matching_skills": ["matching skill 1", "skill 2"]',
    '"missing_skills": ["missing skill 1", "skill 2"]',
    '"qualifications": ["certification 1", "certification 2"]',
    '"strengths": ["strength for this position 1", "strength 2"]',
    '"concerns": ["concern 1", "concern 2"]',
    '"summary": "one-line assessment within 50 characters, focused on fit with the requirements"',
]

VIDEO_SCHEMA_FIELD = (
    '"video_evaluation": {\n'
    '    "appearance_score": number from 1-5 (grooming and appearance),\n'
    '    "communication_score": number from 1-5 (communication),\n'
    '    "attitude_score": number from 1-5 (attitude and posture),\n'
    '    "content_score": number from 1-5 (quality of what was said),\n'
    '    "overall_impression": "overall impression from the video (within 100 characters)",\n'
    '    "video_strengths": ["strength seen in the video 1", "strength 2"],\n'
    '    "video_concerns": ["concern seen in the video 1", "concern 2"]\n'
    '  }'
)


def schema_fields(has_video: bool) -> List[str]:
    fields = list(BASE_SCHEMA_FIELDS)
    if has_video:
        fields.append(VIDEO_SCHEMA_FIELD)
    return fields


def output_schema_section(has_video: bool) -> str:
    body = ",\n".join(f"  {field}" for field in schema_fields(has_video))
    return (
        "[Output Format]\n"
        "Respond in the following JSON format. No other text is needed.\n"
        "{\n" + body + "\n}"
    )


def rubric_section() -> str:
    return (
        "[Recommendation Criteria]\n"
        "- A (strongly recommended): match rate 80% or higher, meets nearly all required qualifications\n"
        "- B (interview recommended): match rate 60-79%, meets the main requirements\n"
        "- C (needs review): match rate 40-59%, meets some requirements\n"
        "- D (not recommended): match rate below 40%, large gap from the requirements"
    )


def build_evaluation_prompt(inputs: PromptInputs) -> str:
    sections = [
        intro_section(),
        job_section(inputs.job_text),
        documents_section(inputs.resume_text),
    ]
    if inputs.has_pdf:
        sections.append(pdf_guidance_section())
        sections.append(missing_fields_caution_section())
    sections.append(criteria_section(inputs.evaluation_points))
    if inputs.has_video:
        sections.append(video_section(inputs.transcript))
    sections.append(output_schema_section(inputs.has_video))
    sections.append(rubric_section())
    return SECTION_SEPARATOR.join(sections)


JOB_SUMMARY_PROMPT = """Summarize the following job posting in a single line (within 50 characters).
Include the job title and the main requirements.

{job}"""

TRANSCRIPT_SUMMARY_PROMPT = """Summarize the following transcript of an interview / self-introduction video in 2000 characters or less, focusing on the points that matter for a hiring evaluation.
Cover the self-introduction, motivation, experience and skills, strengths and weaknesses, and any concrete episodes.

[Transcript]
{transcript}"""


def build_job_summary_prompt(job_text: str) -> str:
    return JOB_SUMMARY_PROMPT.format(job=job_text)


def build_transcript_summary_prompt(transcript: str) -> str:
    return TRANSCRIPT_SUMMARY_PROMPT.format(transcript=transcript)
