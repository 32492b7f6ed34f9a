# =========================================================
# SALES LEDGER (SUPER ADMIN ONLY)
#
# Read-only. Rows are written by POST /images/{id}/buy and
# removed only when their listing is deleted.
# =========================================================

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from garage_sale.database import get_db
from garage_sale.core.auth import get_super_admin_user
from garage_sale.schemas.sale import SaleResponse
from garage_sale.services.purchases import list_sales

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.get("", response_model=list[SaleResponse])
def sales_history(
    db: Session = Depends(get_db),
    super_admin=Depends(get_super_admin_user),
):
    return list_sales(db)
