"""Request identity dependency.

Authentication happens upstream: the gateway in front of this service
verifies the session and forwards the user id in a trusted header. This
module turns that header into a UserIdentity for route handlers.
"""

from fastapi import HTTPException, Request

from routing_forms.config import get_settings
from routing_forms.logging_config import get_logger
from routing_forms.services.form_service import UserIdentity

logger = get_logger(__name__)


async def get_current_user(request: Request) -> UserIdentity:
    """FastAPI dependency resolving the authenticated caller.

    Args:
        request: FastAPI request object

    Returns:
        UserIdentity: Identity carried by the request

    Raises:
        HTTPException(401): If the identity header is missing or blank

    Usage:
        @router.get("/api/routingForms.forms")
        async def forms(user: UserIdentity = Depends(get_current_user)):
            ...
    """
    header = get_settings().user_id_header
    user_id = (request.headers.get(header) or "").strip()

    if not user_id:
        client_ip = request.client.host if request.client else "unknown"
        logger.warning(
            f"Missing {header} header from IP: {client_ip}",
            extra={"client_ip": client_ip, "path": request.url.path}
        )
        raise HTTPException(
            status_code=401,
            detail="Not authenticated"
        )

    return UserIdentity(id=user_id)
