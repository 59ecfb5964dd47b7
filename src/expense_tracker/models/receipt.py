import base64
from typing import Literal, Optional, get_args

from pydantic import BaseModel, Field

MediaType = Literal["image/jpeg", "image/png", "image/gif", "image/webp"]

MEDIA_TYPES = list(get_args(MediaType))


class RawReceipt(BaseModel):
    """An uploaded receipt image. Consumed once by the encoder, never persisted."""

    file_name: str = ""
    content: bytes
    content_type: Optional[str] = Field(None, description="Media type declared by the uploader")


class EncodedPayload(BaseModel):
    data: str = Field(..., description="Base64 encoded image bytes")
    media_type: MediaType

    @property
    def data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.data}"

    def decode(self) -> bytes:
        return base64.b64decode(self.data)
