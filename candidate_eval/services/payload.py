import math
from typing import List, Optional, Sequence

from candidate_eval.models.models import DocumentBlock, ImageBlock, MessageContent, TextBlock
from candidate_eval.models.schemas import VideoFrame


def format_timestamp(ts: Optional[float]) -> str:
    """[m:ss] label for a frame timestamp given in seconds."""
    ts = ts or 0
    minutes = math.floor(ts / 60)
    seconds = math.floor(ts % 60)
    return f"[{minutes}:{seconds:02d}]"


def frame_cap(has_pdf: bool, max_frames: int = 20, max_frames_with_pdf: int = 5) -> int:
    # A PDF document eats most of the input token budget
    return max_frames_with_pdf if has_pdf else max_frames


def build_message_content(
    prompt: str,
    pdf_data: Optional[str] = None,
    frames: Optional[Sequence[VideoFrame]] = None,
    max_frames: int = 20,
    max_frames_with_pdf: int = 5,
) -> MessageContent:
    """Order: PDF document, prompt text, then a (label, image) pair per frame.

    Frames are used in the order given; they are not re-sorted by timestamp.
    """
    frames = list(frames or [])
    if not pdf_data and not frames:
        return MessageContent(text=prompt)

    blocks: List = []
    if pdf_data:
        blocks.append(DocumentBlock.pdf(pdf_data))
    blocks.append(TextBlock(text=prompt))
    for frame in frames[:frame_cap(bool(pdf_data), max_frames, max_frames_with_pdf)]:
        blocks.append(TextBlock(text=format_timestamp(frame.timestamp)))
        blocks.append(ImageBlock.jpeg(frame.data))
    return MessageContent(blocks=blocks, text=prompt)


def select_max_tokens(content: MessageContent, text_max_tokens: int = 1024, multimodal_max_tokens: int = 2048) -> int:
    return multimodal_max_tokens if content.is_multimodal else text_max_tokens
