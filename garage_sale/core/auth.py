# garage_sale/core/auth.py

import logging

from fastapi import Depends, HTTPException, status

from garage_sale.core.jwt import TokenUser, decode_access_token
from garage_sale.core.oauth2 import oauth2_scheme
from garage_sale.models.users import ADMIN_ROLES, ROLE_SUPER_ADMIN

logger = logging.getLogger("app")


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
) -> TokenUser:
    # The role travels inside the token, no users table lookup here
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = decode_access_token(token)

    if user is None:
        logger.warning("Rejected invalid or expired token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def get_admin_user(
    current_user: TokenUser = Depends(get_current_user),
) -> TokenUser:
    if current_user.role not in ADMIN_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Requires admin privileges",
        )
    return current_user


def get_super_admin_user(
    current_user: TokenUser = Depends(get_current_user),
) -> TokenUser:
    if current_user.role != ROLE_SUPER_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Requires super admin privileges",
        )
    return current_user
