# =========================================================
# CREDENTIAL & ROLE STORE
#
# - The first super admin can be created exactly once
# - Only a super admin can create admins
# - Passwords are stored as bcrypt hashes only
# =========================================================

import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from garage_sale.core.hashing import dummy_verify, hash_password, verify_password
from garage_sale.models.users import ROLE_ADMIN, ROLE_SUPER_ADMIN, User

logger = logging.getLogger("app")


def _insert_user(db: Session, username: str, password: str, role: str) -> User:
    if db.query(User).filter(User.username == username).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")

    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role,
    )

    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Unable to create %s %s", role, username)
        raise HTTPException(status_code=500, detail="Unable to create account")

    db.refresh(user)
    return user


def super_admin_exists(db: Session) -> bool:
    return db.query(User.id).filter(User.role == ROLE_SUPER_ADMIN).first() is not None


def _refuse_bootstrap(username: str) -> HTTPException:
    logger.warning("Refused super admin bootstrap for %s: one already exists", username)
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Super admin already exists",
    )


def create_super_admin(db: Session, username: str, password: str) -> User:
    if super_admin_exists(db):
        raise _refuse_bootstrap(username)

    try:
        user = _insert_user(db, username, password, ROLE_SUPER_ADMIN)
    except HTTPException as exc:
        # A concurrent bootstrap won the uq_users_single_super_admin index
        if exc.status_code == status.HTTP_409_CONFLICT and super_admin_exists(db):
            raise _refuse_bootstrap(username)
        raise

    logger.info("Super admin %s created", username)
    return user


def create_admin(db: Session, username: str, password: str, requestor_role: str) -> User:
    if requestor_role != ROLE_SUPER_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only super admin can create admins",
        )

    user = _insert_user(db, username, password, ROLE_ADMIN)
    logger.info("Admin %s created", username)
    return user


def authenticate(db: Session, username: str, password: str) -> User:
    user = db.query(User).filter(User.username == username).first()

    if user is None:
        dummy_verify()
        valid = False
    else:
        valid = verify_password(password, user.password_hash)

    if not valid:
        logger.warning("Failed login for %s", username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return user
