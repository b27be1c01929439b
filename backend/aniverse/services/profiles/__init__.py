from .dto import (
    FriendBriefOut,
    ProfileOut,
    ProfileUpdateIn,
    UserPublicOut,
    to_friend_brief,
    to_user_public,
)
from .service import ProfileService

__all__ = [
    "FriendBriefOut",
    "ProfileOut",
    "ProfileService",
    "ProfileUpdateIn",
    "UserPublicOut",
    "to_friend_brief",
    "to_user_public",
]
