# =========================================================
# PURCHASE TRANSACTION + SALES LEDGER
#
# buy = compare-and-set on images.sold plus the sales insert,
# committed together or rolled back together. Of N concurrent
# buyers for one listing exactly one sees its UPDATE hit a row.
#
# The admin toggle-sold shortcut does NOT write to the ledger.
# =========================================================

import logging

from fastapi import HTTPException, status
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from garage_sale.models.images import Image
from garage_sale.models.sales import Sale

logger = logging.getLogger("app")

DEFAULT_CUSTOMER_NAME = "Anonymous"


def purchase_image(db: Session, image_id: int, customer_name: str | None) -> Sale:
    customer_name = (customer_name or "").strip() or DEFAULT_CUSTOMER_NAME

    try:
        result = db.execute(
            update(Image)
            .where(Image.id == image_id, Image.sold == False)
            .values(sold=True)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Image not available for purchase",
            )

        sale = Sale(image_id=image_id, customer_name=customer_name)
        db.add(sale)
        db.commit()

    except HTTPException:
        raise

    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error processing purchase of image %s", image_id)
        raise HTTPException(status_code=500, detail="Error processing purchase")

    db.refresh(sale)
    logger.info("Image %s sold to %s (sale %s)", image_id, customer_name, sale.id)
    return sale


def list_sales(db: Session) -> list[dict]:
    rows = (
        db.query(Sale, Image.title)
        .join(Image, Sale.image_id == Image.id)
        .order_by(Sale.purchase_date.desc(), Sale.id.desc())
        .all()
    )

    return [
        {
            "id": sale.id,
            "image_id": sale.image_id,
            "customer_name": sale.customer_name,
            "purchase_date": sale.purchase_date,
            "product_name": title,
        }
        for sale, title in rows
    ]
