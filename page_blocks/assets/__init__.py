from .storage import ObjectStorage, StorageError, UploadRejected
from .uploads import AssetJanitor, AssetUploader, SlotStatus, UploadTracker, spawn

__all__ = [
    "ObjectStorage", "StorageError", "UploadRejected",
    "AssetJanitor", "AssetUploader", "SlotStatus", "UploadTracker", "spawn",
]
