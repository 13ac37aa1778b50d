from pydantic import BaseModel, Field
from typing import Annotated, List, Literal, Union


class Criterion(BaseModel):
    label: str
    weight: int = Field(ge=1, le=5)


# -------- Content blocks (Anthropic Messages API) --------
class Base64Source(BaseModel):
    type: Literal["base64"] = "base64"
    media_type: str
    data: str


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageBlock(BaseModel):
    type: Literal["image"] = "image"
    source: Base64Source

    @classmethod
    def jpeg(cls, data: str) -> "ImageBlock":
        return cls(source=Base64Source(media_type="image/jpeg", data=data))


class DocumentBlock(BaseModel):
    type: Literal["document"] = "document"
    source: Base64Source

    @classmethod
    def pdf(cls, data: str) -> "DocumentBlock":
        return cls(source=Base64Source(media_type="application/pdf", data=data))


ContentBlock = Annotated[Union[TextBlock, ImageBlock, DocumentBlock], Field(discriminator="type")]


class MessageContent(BaseModel):
    """Either a plain prompt string or an ordered block sequence."""
    blocks: List[ContentBlock] = Field(default_factory=list)
    text: str = ""

    @property
    def is_multimodal(self) -> bool:
        return bool(self.blocks)

    def to_api(self) -> Union[str, List[dict]]:
        if self.blocks:
            return [block.model_dump() for block in self.blocks]
        return self.text
