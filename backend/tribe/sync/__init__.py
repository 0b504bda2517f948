from tribe.sync.loop import (
    STATUS_ERROR,
    STATUS_LOADING,
    STATUS_NOT_FOUND,
    STATUS_READY,
    SyncLoop,
    SyncState,
)

__all__ = [
    "STATUS_ERROR",
    "STATUS_LOADING",
    "STATUS_NOT_FOUND",
    "STATUS_READY",
    "SyncLoop",
    "SyncState",
]
