"""
Session user schemas
"""

from heimeshow.schemas.base import BaseSchema


class SessionUserResponse(BaseSchema):
    """User behind the bearer token"""
    id: str
    email: str
    name: str = ""
    phone: str = ""
