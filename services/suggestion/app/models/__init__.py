from app.models.enums import UserType
from app.models.social import Block, Follow
from app.models.user import User

__all__ = [
    "User",
    "UserType",
    "Follow",
    "Block",
]
