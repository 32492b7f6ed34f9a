# garage_sale/core/hashing.py

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # malformed or unknown hash in the users table
        return False


def dummy_verify() -> None:
    # Same cost as a real verification, for usernames that do not exist
    pwd_context.dummy_verify()
