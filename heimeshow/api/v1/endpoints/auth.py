"""
Authentication endpoints

Tokens are issued by the HeimeShow sign-in service; this API only verifies
them and reports who they belong to.
"""

from typing import Any
from fastapi import APIRouter, Depends

from heimeshow.api.dependencies import get_current_session
from heimeshow.schemas.user import SessionUserResponse
from heimeshow.services.session_service import Session

router = APIRouter()


@router.get("/me", response_model=SessionUserResponse)
async def get_me(session: Session = Depends(get_current_session)) -> Any:
    """
    Get the user behind the bearer token
    """
    user = session.user
    return SessionUserResponse(id=user.id, email=user.email, name=user.name, phone=user.phone)
