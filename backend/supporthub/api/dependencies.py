import jwt
from fastapi import Depends, Header, HTTPException, Request, status

from supporthub.config import settings
from supporthub.schemas.caller import CallerContext
from supporthub.services.ticket_source import TicketSource, TicketSourceError


def get_ticket_source(request: Request) -> TicketSource:
    return request.app.state.ticket_source


def decode_token(token: str) -> dict:
    """Decode and validate a JWT issued by the auth provider. Raises jwt.InvalidTokenError on failure."""
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
    )


async def get_caller(
    authorization: str | None = Header(None),
    source: TicketSource = Depends(get_ticket_source),
) -> CallerContext:
    """Resolve the caller's identity from the bearer token and their role from the store."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")

    token = authorization[7:]
    try:
        payload = decode_token(token)
        caller_id = str(payload["sub"])
    except (jwt.InvalidTokenError, KeyError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    try:
        role = await source.fetch_role(caller_id)
    except TicketSourceError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Ticket store unavailable")
    return CallerContext(role=role, caller_id=caller_id)


async def require_staff(caller: CallerContext = Depends(get_caller)) -> CallerContext:
    """Analytics are reserved for analysts and admins."""
    if not caller.is_staff:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Role {caller.role.value} not authorized. Required: ['analyst', 'admin']",
        )
    return caller
