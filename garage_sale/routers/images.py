# garage_sale/routers/images.py

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from garage_sale.database import get_db
from garage_sale.core.auth import get_admin_user, get_current_user, get_super_admin_user
from garage_sale.schemas.common import MessageResponse
from garage_sale.schemas.image import ImageResponse, ImageUpdate
from garage_sale.schemas.sale import PurchaseRequest
from garage_sale.services import ingestion, listings, purchases

router = APIRouter(
    prefix="/images",
    tags=["Images"],
)


@router.post(
    "",
    response_model=ImageResponse,
    status_code=status.HTTP_201_CREATED,
)
def upload_image(
    image: UploadFile | None = File(None),
    title: str | None = Form(None),
    description: str | None = Form(None),
    price: str | None = Form(None),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    # Every field is optional here so the pipeline can check them in its own order
    return ingestion.ingest_upload(db, image, title, description, price)


@router.get("", response_model=list[ImageResponse])
def list_images(db: Session = Depends(get_db)):
    return listings.list_images(db)


@router.post("/{image_id}/buy", response_model=MessageResponse)
def buy_image(
    image_id: int,
    purchase: PurchaseRequest | None = None,
    db: Session = Depends(get_db),
):
    customer_name = purchase.customer_name if purchase else None
    purchases.purchase_image(db, image_id, customer_name)

    return {"message": "Purchase successful"}


@router.put("/{image_id}/toggle-block", response_model=MessageResponse)
def toggle_block(
    image_id: int,
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    listings.toggle_flag(db, image_id, "is_blocked")

    return {"message": "Image status updated successfully"}


@router.put("/{image_id}/toggle-sold", response_model=MessageResponse)
def toggle_sold(
    image_id: int,
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    listings.toggle_flag(db, image_id, "sold")

    return {"message": "Image sold status updated successfully"}


@router.put("/{image_id}/toggle-coming-soon", response_model=MessageResponse)
def toggle_coming_soon(
    image_id: int,
    db: Session = Depends(get_db),
    super_admin=Depends(get_super_admin_user),
):
    listings.toggle_flag(db, image_id, "coming_soon")

    return {"message": "Image coming soon status updated successfully"}


@router.put("/{image_id}", response_model=MessageResponse)
def update_image(
    image_id: int,
    image_data: ImageUpdate,
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    listings.update_image(db, image_id, image_data)

    return {"message": "Image updated successfully"}


@router.delete("/{image_id}", response_model=MessageResponse)
def delete_image(
    image_id: int,
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    listings.delete_image(db, image_id)

    return {"message": "Image deleted successfully"}
