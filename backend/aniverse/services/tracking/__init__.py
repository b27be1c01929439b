from .dto import StatsOut, TrackedItemOut, TrackedItemUpsertIn
from .service import TrackedItemService, normalize_external_id, normalize_status

__all__ = [
    "StatsOut",
    "TrackedItemOut",
    "TrackedItemService",
    "TrackedItemUpsertIn",
    "normalize_external_id",
    "normalize_status",
]
