# =========================================================
# IMAGE INGESTION PIPELINE
#
# 1. Validate file type, size, title, description, price
#    (nothing touches the disk or the database before this passes)
# 2. Write the raw upload under a generated name
# 3. Re-encode: fit inside 800x600, never upscale, WEBP q80
# 4. Drop the raw upload
# 5. Insert the listing row pointing at the processed file
#
# A listing row never exists without its processed file.
# =========================================================

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

from fastapi import HTTPException, UploadFile, status
from PIL import Image as PILImage
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from garage_sale.core.config import settings
from garage_sale.models.images import Image
from garage_sale.schemas.image import MAX_PRICE, MAX_TITLE_LENGTH, round_price
from garage_sale.services import storage

logger = logging.getLogger("app")

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
ALLOWED_MIME_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
CHUNK_SIZE = 1024 * 1024


class ImageProcessingError(Exception):
    pass


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def validate_file_type(upload: UploadFile | None) -> str:
    if upload is None or not upload.filename:
        raise _bad_request("No image uploaded")

    extension = Path(upload.filename).suffix.lower()
    mime_type = (upload.content_type or "").split(";")[0].strip().lower()

    if extension not in ALLOWED_EXTENSIONS or mime_type not in ALLOWED_MIME_TYPES:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only images are allowed (jpeg, jpg, png, gif, webp)",
        )

    return extension


def read_limited(upload: UploadFile, limit: int) -> bytes:
    data = bytearray()

    while True:
        chunk = upload.file.read(CHUNK_SIZE)
        if not chunk:
            break

        data.extend(chunk)

        if len(data) > limit:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File is too large. The limit is {settings.MAX_UPLOAD_SIZE_MB} MB.",
            )

    return bytes(data)


def clean_title(title) -> str:
    if not isinstance(title, str) or not title.strip():
        raise _bad_request("Title is required and must be a non-empty string")

    title = title.strip()
    if len(title) > MAX_TITLE_LENGTH:
        raise _bad_request(f"Title must be at most {MAX_TITLE_LENGTH} characters")

    return title


def clean_description(description) -> str | None:
    if description is None:
        return None
    if not isinstance(description, str):
        raise _bad_request("Description must be a string")
    return description.strip() or None


def parse_price(raw) -> Decimal:
    try:
        price = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        raise _bad_request("Price must be a number greater than 0")

    if not price.is_finite():
        raise _bad_request("Price must be a number greater than 0")

    # Bound before rounding: quantize overflows the context on huge values
    if price <= 0:
        raise _bad_request("Price must be a number greater than 0")

    if price >= MAX_PRICE:
        raise _bad_request("Price must be below 100 million")

    price = round_price(price)

    if price <= 0:
        raise _bad_request("Price must be a number greater than 0")

    if price >= MAX_PRICE:
        raise _bad_request("Price must be below 100 million")

    return price


def optimize_image(source: Path, destination: Path) -> Path:
    """Re-encode ``source`` into ``destination``.

    Any partially written output is removed before the error propagates.
    """
    bounds = (settings.IMAGE_MAX_WIDTH, settings.IMAGE_MAX_HEIGHT)

    try:
        with PILImage.open(source) as img:
            # animated gif/webp: keep the first frame only
            img.seek(0)

            has_alpha = img.mode in ("RGBA", "LA") or (
                img.mode == "P" and "transparency" in img.info
            )
            frame = img.convert("RGBA" if has_alpha else "RGB")

        # thumbnail() keeps the aspect ratio and never enlarges
        frame.thumbnail(bounds)
        frame.save(destination, format=settings.IMAGE_FORMAT.upper(), quality=settings.IMAGE_QUALITY)

        if not destination.is_file():
            raise ImageProcessingError(f"Optimized file was not written: {destination}")

    except ImageProcessingError:
        storage.discard(destination)
        raise
    except (OSError, ValueError, PILImage.DecompressionBombError) as exc:
        storage.discard(destination)
        raise ImageProcessingError(str(exc)) from exc

    logger.info("Image optimized: %s", destination)
    return destination


def ingest_upload(
    db: Session,
    upload: UploadFile | None,
    title,
    description,
    price,
) -> Image:
    extension = validate_file_type(upload)
    data = read_limited(upload, settings.max_upload_bytes)
    title = clean_title(title)
    description = clean_description(description)
    price = parse_price(price)

    base = storage.new_upload_base()
    raw_name = base + (storage.RAW_WEBP_SUFFIX if extension == ".webp" else extension)
    raw_path = storage.upload_path(raw_name)
    optimized_path = storage.upload_path(f"{base}.{settings.IMAGE_FORMAT}")

    try:
        raw_path.write_bytes(data)
    except OSError:
        storage.discard(raw_path)
        logger.exception("Could not store upload %s", raw_path)
        raise HTTPException(status_code=500, detail="Unable to store upload")

    logger.info("Optimizing image: %s -> %s", raw_path, optimized_path)

    try:
        optimize_image(raw_path, optimized_path)
    except ImageProcessingError as exc:
        logger.error("Image optimization failed for %s: %s", raw_path, exc)
        raise HTTPException(status_code=500, detail="Image processing failed")
    finally:
        storage.discard(raw_path)

    image = Image(
        title=title,
        description=description,
        price=price,
        image_url=storage.url_for(optimized_path.name),
    )

    try:
        db.add(image)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        storage.discard(optimized_path)
        logger.exception("Could not save listing for %s", optimized_path)
        raise HTTPException(status_code=500, detail="Unable to save image")

    db.refresh(image)
    logger.info("Listing %s created: %s", image.id, image.image_url)
    return image
