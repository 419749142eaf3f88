# dependencies.py
"""
Shared FastAPI dependencies: bearer-token auth and ledger error mapping.
"""
import logging
import os

from fastapi import HTTPException, Request, status
from jose import JWTError, jwt
from dotenv import load_dotenv

from services.errors import (
    AlreadyReversedError,
    ConcurrencyConflictError,
    LedgerError,
    NotFoundError,
    ValidationError,
)

load_dotenv()
SECRET_KEY = os.getenv("JWT_SECRET")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AlreadyReversedError, status.HTTP_409_CONFLICT),
    (ConcurrencyConflictError, status.HTTP_409_CONFLICT),
)


# Token Auth Dependency
def verify_token(request: Request):
    auth = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing token")
    token = auth.split(" ")[1]
    if not SECRET_KEY:
        logger.error("JWT_SECRET is not configured")
        raise HTTPException(status_code=500, detail="Authentication is not configured")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(status_code=403, detail="Invalid token")


def ledger_http_error(error: LedgerError) -> HTTPException:
    """Translate a service-layer error into the HTTPException a route raises."""
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=code, detail=str(error))
    logger.error("Unmapped ledger error: %s", error)
    return HTTPException(status_code=500, detail="Internal server error")
