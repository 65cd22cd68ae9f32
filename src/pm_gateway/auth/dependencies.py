"""FastAPI dependency: get_current_caller.

Usage in any protected router:
    from src.pm_gateway.auth.dependencies import get_current_caller

    @router.post("/protected")
    async def protected(caller: str = Depends(get_current_caller)):
        ...
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.pm_common.errors import UnauthenticatedError
from src.pm_gateway.auth.jwt_handler import decode_token

# auto_error=False so a missing header surfaces as our 1001 envelope, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Return the authenticated caller identity (the token's `sub` claim).

    Raises UnauthenticatedError (HTTP 401) if the token is missing, invalid,
    expired, or carries no subject.
    """
    if credentials is None:
        raise UnauthenticatedError()
    payload = decode_token(credentials.credentials)
    caller = payload.get("sub")
    if not caller:
        raise UnauthenticatedError()
    return caller
