# garage_sale/routers/maintenance.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from garage_sale.database import get_db
from garage_sale.core.auth import get_super_admin_user
from garage_sale.schemas.common import SweepResponse
from garage_sale.services.storage import sweep_orphan_uploads

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


@router.post("/sweep-uploads", response_model=SweepResponse)
def sweep_uploads(
    dry_run: bool = False,
    db: Session = Depends(get_db),
    super_admin=Depends(get_super_admin_user),
):
    """Remove upload files that no listing points at."""
    return {"removed": sweep_orphan_uploads(db, dry_run=dry_run)}
