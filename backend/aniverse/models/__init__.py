from aniverse.models.friendship import FriendRequest, Friendship
from aniverse.models.refresh_token import RefreshToken
from aniverse.models.tracked_item import TRACKED_STATUSES, TrackedItem
from aniverse.models.user import SOCIAL_LINK_KEYS, User

__all__ = [
    "FriendRequest",
    "Friendship",
    "RefreshToken",
    "SOCIAL_LINK_KEYS",
    "TRACKED_STATUSES",
    "TrackedItem",
    "User",
]
