# =========================================================
# LISTING STORE
#
# Toggles are a single UPDATE ... SET flag = NOT flag, so two
# admins toggling at once both land (last write wins) and a
# missing id is detected from the affected row count.
# =========================================================

import logging

from fastapi import HTTPException, status
from sqlalchemy import delete, not_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from garage_sale.models.images import Image
from garage_sale.schemas.image import ImageUpdate
from garage_sale.services import storage

logger = logging.getLogger("app")

TOGGLEABLE_FLAGS = {
    "is_blocked": Image.is_blocked,
    "sold": Image.sold,
    "coming_soon": Image.coming_soon,
}


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")


def list_images(db: Session) -> list[Image]:
    return (
        db.query(Image)
        .order_by(Image.created_at.desc(), Image.id.desc())
        .all()
    )


def get_image(db: Session, image_id: int) -> Image:
    image = db.query(Image).filter(Image.id == image_id).first()

    if not image:
        raise _not_found()

    return image


def toggle_flag(db: Session, image_id: int, flag: str) -> None:
    column = TOGGLEABLE_FLAGS[flag]

    try:
        result = db.execute(
            update(Image)
            .where(Image.id == image_id)
            .values({column: not_(column)})
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            db.rollback()
            raise _not_found()

        db.commit()

    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error toggling %s on image %s", flag, image_id)
        raise HTTPException(status_code=500, detail="Error updating image status")

    logger.info("Image %s: toggled %s", image_id, flag)


def update_image(db: Session, image_id: int, data: ImageUpdate) -> Image:
    image = get_image(db, image_id)

    image.title = data.title
    image.description = data.description
    image.price = data.price

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating image %s", image_id)
        raise HTTPException(status_code=500, detail="Error updating image")

    db.refresh(image)
    return image


def image_url_for(db: Session, image_id: int) -> str:
    row = db.query(Image.image_url).filter(Image.id == image_id).first()

    if not row:
        raise _not_found()

    return row.image_url


def delete_image(db: Session, image_id: int) -> None:
    image_url = image_url_for(db, image_id)

    try:
        # sales rows go with it (ON DELETE CASCADE)
        result = db.execute(
            delete(Image)
            .where(Image.id == image_id)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            # deleted by a concurrent request since the lookup
            db.rollback()
            raise _not_found()

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error deleting image %s", image_id)
        raise HTTPException(status_code=500, detail="Error deleting image")

    logger.info("Image %s deleted", image_id)

    # The row is gone; file cleanup can no longer fail the request
    storage.discard(*storage.listing_files(image_url))
