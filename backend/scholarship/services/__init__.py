# Services
from scholarship.services.storage_service import StorageService, UploadedDocument, get_storage_service

__all__ = ["StorageService", "UploadedDocument", "get_storage_service"]
