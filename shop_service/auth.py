# shop_service/auth.py
import hmac
from typing import Optional

from fastapi import Header, Request

from shop_service.errors import Unauthorized

ADMIN_HEADER = "X-Admin-Secret"


def check_admin_secret(configured: str, supplied: Optional[str]) -> bool:
    """No configured secret means admin access is open to everyone."""
    if not configured:
        return True
    if supplied is None:
        return False
    return hmac.compare_digest(configured.encode(), supplied.encode())


async def require_admin(request: Request, x_admin_secret: Optional[str] = Header(default=None)):
    if not check_admin_secret(request.app.state.settings.admin_secret, x_admin_secret):
        raise Unauthorized()
