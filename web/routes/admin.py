from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from web.deps import VIEW_AS_CUSTOMER_KEY, get_admin_service, is_viewing_as_customer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


@router.get("/session")
async def admin_session(request: Request):
    admin_service = get_admin_service(request)
    session = admin_service.get_session(request.session.get("user_id"), is_viewing_as_customer(request))
    return session.model_dump()


@router.post("/view-mode")
async def toggle_view_mode(request: Request):
    admin_service = get_admin_service(request)
    user_id = request.session.get("user_id")
    session = admin_service.get_session(user_id, is_viewing_as_customer(request))
    if not session.is_actual_admin:
        logger.warning("View mode toggle denied: user=%s is not an admin", user_id)
        return JSONResponse({"detail": "Admin role required"}, status_code=403)

    session = session.toggle_view_mode()
    if session.is_viewing_as_customer:
        request.session[VIEW_AS_CUSTOMER_KEY] = user_id
    else:
        request.session.pop(VIEW_AS_CUSTOMER_KEY, None)
    logger.info("User %s switched view mode: viewing_as_customer=%s", user_id, session.is_viewing_as_customer)
    return session.model_dump()
