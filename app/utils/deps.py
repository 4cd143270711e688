import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.database import get_db  # noqa: F401
from app.core.exceptions import UnauthorizedError
from app.core.security import decode_access_token
from app.core.tenant import TenantContext

logger = logging.getLogger(__name__)

# auto_error is off so a missing header goes through the same 401 envelope as a bad token.
http_bearer = HTTPBearer(auto_error=False)


def get_tenant_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
) -> TenantContext:
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    claims = decode_access_token(credentials.credentials)
    context = TenantContext.from_claims(claims)
    if context is None:
        logger.info("Rejected bearer token without usable claims")
        raise UnauthorizedError("Could not validate credentials")
    return context
