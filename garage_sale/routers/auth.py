from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from garage_sale.database import get_db
from garage_sale.core.auth import get_current_user
from garage_sale.core.jwt import TokenUser, create_access_token
from garage_sale.schemas.common import MessageResponse
from garage_sale.schemas.user import TokenResponse, UserCreate, UserLogin
from garage_sale.services import users

router = APIRouter(tags=["Authentication"])


# ---------------- LOGIN (TOKEN-BASED) ----------------
@router.post("/login", response_model=TokenResponse)
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
):
    user = users.authenticate(db, credentials.username, credentials.password)

    token = create_access_token(
        user_id=user.id,
        username=user.username,
        role=user.role,
    )

    return {"token": token, "token_type": "bearer"}


# ---------------- FIRST SUPER ADMIN (ONE TIME) ----------------
@router.post(
    "/create-super-admin",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_super_admin(user_data: UserCreate, db: Session = Depends(get_db)):
    users.create_super_admin(db, user_data.username, user_data.password)

    return {"message": "Super admin created successfully"}


# ---------------- ADMINS (SUPER ADMIN ONLY) ----------------
@router.post(
    "/create-admin",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_admin(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: TokenUser = Depends(get_current_user),
):
    users.create_admin(db, user_data.username, user_data.password, current_user.role)

    return {"message": "Admin created successfully"}
