"""Acting-user resolution.

Authentication happens upstream; the gateway forwards the authenticated
member id in the ``X-User-Id`` header.
"""
from fastapi import Header

from union_meetings.core.errors import Unauthenticated


def get_current_user_id(x_user_id: int | None = Header(default=None)) -> int:
    """Dependency returning the id of the member making the request."""
    if x_user_id is None:
        raise Unauthenticated("Not authenticated")
    return x_user_id
