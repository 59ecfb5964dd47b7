import base64
import io
import sys
from typing import Optional

from PIL import Image, UnidentifiedImageError

from expense_tracker.logger import get_logger
from expense_tracker.exception import CustomException
from expense_tracker.models import RawReceipt, EncodedPayload
from expense_tracker.utils.load_config import load_config_file

logger = get_logger(__name__)

DEFAULT_MEDIA_TYPE = "image/jpeg"
# JPEG is the fallback, so only the other supported types are matched
_PASSTHROUGH_MEDIA_TYPES = {"image/png", "image/gif", "image/webp"}

DEFAULT_THUMBNAIL_SIZE = 1024


def resolve_media_type(declared: Optional[str]) -> str:
    """
    Map the uploader's declared content type onto a type the model accepts.

    PNG, GIF and WEBP pass through when declared exactly; everything else,
    unsupported types such as image/heic included, is tagged as JPEG.
    """
    if declared in _PASSTHROUGH_MEDIA_TYPES:
        return declared
    return DEFAULT_MEDIA_TYPE


def encode_receipt(raw: RawReceipt) -> EncodedPayload:
    """Base64 encode the receipt bytes for transport. No size limit is applied here."""
    try:
        media_type = resolve_media_type(raw.content_type)
        if media_type != raw.content_type:
            logger.debug("Declared type %r for %s sent as %s", raw.content_type, raw.file_name, media_type)

        data = base64.b64encode(raw.content).decode("ascii")
        logger.info("Encoded %s (%d bytes) as %s", raw.file_name or "receipt", len(raw.content), media_type)
        return EncodedPayload(data=data, media_type=media_type)
    except Exception as e:
        raise CustomException(e, sys)


def build_receipt_url(raw: RawReceipt, max_size: Optional[int] = None) -> str:
    """
    Build the data URL kept on the expense for later review.

    Images Pillow can read are downscaled to a JPEG preview; anything else is
    kept as-is under its resolved media type.
    """
    if max_size is None:
        max_size = load_config_file().get("uploads", {}).get("thumbnail_size", DEFAULT_THUMBNAIL_SIZE)

    try:
        with Image.open(io.BytesIO(raw.content)) as img:
            preview = img.convert("RGB")
            preview.thumbnail((max_size, max_size))
            buf = io.BytesIO()
            preview.save(buf, format="JPEG", quality=85)
        data = base64.b64encode(buf.getvalue()).decode("ascii")
        return f"data:image/jpeg;base64,{data}"
    except (UnidentifiedImageError, OSError) as e:
        logger.warning("Preview not generated for %s: %s", raw.file_name or "receipt", e)
        return encode_receipt(raw).data_url
