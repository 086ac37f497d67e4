"""JWT helpers.

Uses the HS256 secret from smartfarm.secrets.yaml (``jwt.secret_key``).
"""
import logging
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from smartfarm.config import JWTSecrets

logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    """The bearer token could not be verified."""


class CurrentUser(BaseModel):
    """Identity carried by a verified token."""
    id: str
    role: Optional[str] = None


def decode_access_token(token: str, secrets: JWTSecrets) -> CurrentUser:
    """Verify ``token`` and return the caller it identifies.

    Raises:
        InvalidTokenError: Bad signature, expired, or no ``sub`` claim
    """
    try:
        payload = jwt.decode(token, secrets.secret_key, algorithms=[secrets.algorithm])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    subject = payload.get("sub")
    if subject is None:
        raise InvalidTokenError("'sub' missing in token payload")

    return CurrentUser(id=str(subject), role=payload.get("role"))
