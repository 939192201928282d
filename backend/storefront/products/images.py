"""Product image storage: downscale, re-encode as JPEG, write under UPLOAD_DIR."""
import logging
import secrets
import time
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from storefront.core.config import settings

logger = logging.getLogger(__name__)


def upload_dir() -> Path:
    path = Path(settings.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def stored_filename(original_name: str) -> str:
    # strip any client-supplied directories before building the name
    name = Path(original_name or "image").name
    return f"{int(time.time() * 1000)}-{secrets.token_hex(3)}-{'-'.join(name.lower().split(' '))}"


def compress_image(raw: bytes, *, max_width: int | None = None, quality: int | None = None) -> bytes:
    """
    Returns JPEG bytes no wider than ``max_width`` (aspect ratio kept).
    Raises ValueError when ``raw`` is not a readable image.
    """
    max_width = max_width or settings.IMAGE_MAX_WIDTH
    quality = quality or settings.IMAGE_QUALITY
    try:
        with Image.open(BytesIO(raw)) as img:
            img = ImageOps.exif_transpose(img)
            if img.width > max_width:
                height = max(1, round(img.height * max_width / img.width))
                img = img.resize((max_width, height), Image.Resampling.LANCZOS)
            if img.mode != "RGB":
                img = img.convert("RGB")
            out = BytesIO()
            img.save(out, format="JPEG", quality=quality)
    except (UnidentifiedImageError, OSError) as exc:
        raise ValueError(f"Could not read image: {exc}") from exc
    return out.getvalue()


def save_image(raw: bytes, original_name: str) -> str:
    """Compress and store an upload; returns the stored file name."""
    data = compress_image(raw)
    filename = stored_filename(original_name)
    (upload_dir() / filename).write_bytes(data)
    return filename


def remove_image(filename: str | None) -> None:
    """Best-effort delete; a missing or locked file is logged, never raised."""
    if not filename:
        return
    try:
        (Path(settings.UPLOAD_DIR) / Path(filename).name).unlink()
    except OSError:
        logger.warning("Failed to delete image %s", filename, exc_info=True)
