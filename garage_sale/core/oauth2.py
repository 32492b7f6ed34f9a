from fastapi.security import OAuth2PasswordBearer

# Reads "Authorization: Bearer <token>"; missing tokens are reported by the role gates
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/login", auto_error=False)
