"""Admin capability check.

Login and sessions belong to the wider platform. This service only asks
"is the caller an admin, and which one?". The default answer comes from the
X-Admin-Key header matched against settings.admin_api_keys; deployments with
a different session layer override get_current_admin.
"""

import hmac
from dataclasses import dataclass
from typing import Annotated, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, Header, HTTPException

from bindash.config import Settings
from bindash.container import Container


@dataclass(frozen=True)
class AdminIdentity:
    admin_id: int


@inject
async def get_current_admin(
    x_admin_key: Annotated[Optional[str], Header(alias="X-Admin-Key")] = None,
    settings: Settings = Depends(Provide[Container.settings]),
) -> Optional[AdminIdentity]:
    """Identity of the calling admin, or None when the caller is not one."""
    if not x_admin_key:
        return None
    for key, admin_id in settings.admin_api_keys.items():
        if hmac.compare_digest(key.encode(), x_admin_key.encode()):
            return AdminIdentity(admin_id=admin_id)
    return None


async def require_admin(
    admin: Annotated[Optional[AdminIdentity], Depends(get_current_admin)],
) -> AdminIdentity:
    if admin is None:
        raise HTTPException(status_code=403, detail="Forbidden")
    return admin


CurrentAdmin = Annotated[Optional[AdminIdentity], Depends(get_current_admin)]
RequiredAdmin = Annotated[AdminIdentity, Depends(require_admin)]
