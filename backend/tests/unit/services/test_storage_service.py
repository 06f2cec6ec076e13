"""
Unit Tests for the Storage Service (local mode)
"""
import pytest

from scholarship.core.config import settings
from scholarship.core.exceptions import UploadError
from scholarship.services.storage_service import StorageService, UploadedDocument, dated_folder

from conftest import PDF_BYTES, RecordingStorage


def make_document(field_name: str, filename: str = None) -> UploadedDocument:
    return UploadedDocument(
        field_name=field_name,
        filename=filename or f"{field_name}.pdf",
        content=PDF_BYTES,
        content_type="application/pdf",
    )


class TestLocalStorage:

    @pytest.mark.asyncio
    async def test_upload_writes_file_and_returns_public_url(self):
        storage = StorageService()

        url = await storage.upload(PDF_BYTES, "aadhar.PDF", "application/pdf", folder="beneficiaries/test")

        assert url.startswith("http://test/uploads/beneficiaries/test/")
        assert url.endswith(".pdf")
        stored = settings.upload_path / storage.key_from_url(url)
        assert stored.read_bytes() == PDF_BYTES

    @pytest.mark.asyncio
    async def test_each_upload_gets_its_own_key(self):
        storage = StorageService()

        first = await storage.upload(PDF_BYTES, "same.pdf", folder="dup")
        second = await storage.upload(PDF_BYTES, "same.pdf", folder="dup")

        assert first != second

    @pytest.mark.asyncio
    async def test_delete_removes_file(self):
        storage = StorageService()
        url = await storage.upload(PDF_BYTES, "photo.png", "image/png", folder="delete-me")
        stored = settings.upload_path / storage.key_from_url(url)

        assert await storage.delete(url) is True
        assert not stored.exists()
        assert await storage.delete(url) is False

    @pytest.mark.asyncio
    async def test_delete_ignores_foreign_urls(self):
        storage = StorageService()

        assert await storage.delete("https://elsewhere.example.com/file.pdf") is False

    def test_generate_key_keeps_extension_only(self):
        key = StorageService.generate_key("/applications/abc/", "My Marksheet.JPG")

        assert key.startswith("applications/abc/")
        assert key.endswith(".jpg")
        assert "Marksheet" not in key

    def test_dated_folder(self):
        folder = dated_folder("beneficiaries")

        prefix, year, month = folder.split("/")
        assert prefix == "beneficiaries"
        assert len(year) == 4 and len(month) == 2


class TestUploadMany:
    """Concurrent upload with all-or-nothing cleanup"""

    @pytest.mark.asyncio
    async def test_returns_url_per_field(self):
        storage = RecordingStorage()
        documents = {name: make_document(name) for name in ("aadhar_card", "passport_size_photo", "house_image")}

        urls = await storage.upload_many(documents, folder="batch")

        assert set(urls) == set(documents)
        assert len(set(urls.values())) == 3
        assert storage.deleted == []

    @pytest.mark.asyncio
    async def test_empty_batch_uploads_nothing(self):
        storage = RecordingStorage()

        assert await storage.upload_many({}, folder="batch") == {}
        assert storage.uploaded == []

    @pytest.mark.asyncio
    async def test_failure_removes_successful_uploads(self):
        storage = RecordingStorage()
        storage.fail_filenames.add("house_image.pdf")
        documents = {name: make_document(name) for name in ("aadhar_card", "passport_size_photo", "house_image")}

        with pytest.raises(UploadError) as exc_info:
            await storage.upload_many(documents, folder="batch")

        assert exc_info.value.details["fields"] == ["house_image"]
        assert len(storage.uploaded) == 2
        assert sorted(storage.deleted) == sorted(storage.uploaded)
        for url in storage.uploaded:
            assert not (settings.upload_path / storage.key_from_url(url)).exists()
