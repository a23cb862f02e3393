"""Request identity helpers.

Authentication happens upstream; the gateway forwards the verified member
handle and roles in request headers, which are parsed here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from fastapi import Header, HTTPException

HANDLE_HEADER = "X-User-Handle"
ROLES_HEADER = "X-User-Roles"


@dataclass(frozen=True)
class CurrentUser:
    handle: str
    roles: Tuple[str, ...] = field(default_factory=tuple)


def _parse_roles_header(header_value: Optional[str]) -> Tuple[str, ...]:
    """Parse a comma-separated roles header, dropping blanks."""
    if not header_value:
        return ()
    return tuple(r.strip() for r in header_value.split(",") if r.strip())


def get_current_user(
    x_user_handle: Optional[str] = Header(None, alias=HANDLE_HEADER),
    x_user_roles: Optional[str] = Header(None, alias=ROLES_HEADER),
) -> CurrentUser:
    """FastAPI dependency resolving the acting member from gateway headers."""
    handle = (x_user_handle or "").strip()
    if not handle:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return CurrentUser(handle=handle, roles=_parse_roles_header(x_user_roles))
