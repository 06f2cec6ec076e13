"""
Storage Service - Handles document storage on local disk or S3/MinIO

Every uploaded document gets a fresh object key under a folder
(``beneficiaries/<date>/...`` or ``applications/<user_id>/...``) and is
addressed by its public URL afterwards; the database only stores URLs.
"""

import asyncio
import mimetypes
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import urlparse
from uuid import uuid4

import aiofiles
import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from scholarship.core.config import settings
from scholarship.core.exceptions import StorageError, UploadError
from scholarship.core.logging_config import logger


@dataclass
class UploadedDocument:
    """A file taken off a multipart request, ready for storage"""
    field_name: str
    filename: str
    content: bytes
    content_type: str

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix.lower()


class StorageService:
    """
    Unified storage service supporting local disk, S3 and MinIO
    - local: files under UPLOAD_DIR, served by the app at /uploads
    - s3: boto3 client against AWS or a MinIO endpoint
    """

    def __init__(self):
        self._client = None
        self._mode = settings.STORAGE_MODE.lower()
        self._bucket_name = settings.S3_BUCKET_NAME
        self._initialized = False
        if self._mode not in ("local", "s3"):
            raise StorageError(f"Unsupported STORAGE_MODE '{settings.STORAGE_MODE}'")
        logger.info(f"StorageService initialized (mode: {self._mode})")

    @property
    def mode(self) -> str:
        return self._mode

    def _get_client(self):
        """Lazy initialization of S3/MinIO client"""
        if self._client is None:
            if settings.USE_MINIO:
                self._client = boto3.client(
                    's3',
                    endpoint_url=f"http://{settings.MINIO_ENDPOINT}",
                    aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                    aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                    config=Config(
                        signature_version='s3v4',
                        s3={'addressing_style': 'path'}
                    ),
                    region_name=settings.AWS_REGION
                )
            elif settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
                self._client = boto3.client(
                    's3',
                    aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                    aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                    region_name=settings.AWS_REGION
                )
            else:
                # Use IAM role credentials (automatic in ECS/EC2)
                self._client = boto3.client('s3', region_name=settings.AWS_REGION)
                logger.info("S3 client using IAM role credentials")

            self._ensure_bucket()

        return self._client

    def _ensure_bucket(self):
        """Create bucket if it doesn't exist"""
        if self._initialized:
            return

        try:
            self._client.head_bucket(Bucket=self._bucket_name)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', '')
            if error_code in ['404', 'NoSuchBucket']:
                if settings.USE_MINIO or settings.AWS_REGION == 'us-east-1':
                    self._client.create_bucket(Bucket=self._bucket_name)
                else:
                    self._client.create_bucket(
                        Bucket=self._bucket_name,
                        CreateBucketConfiguration={'LocationConstraint': settings.AWS_REGION}
                    )
                logger.info(f"Created bucket '{self._bucket_name}'")
            else:
                raise

        self._initialized = True

    @staticmethod
    def generate_key(folder: str, filename: str) -> str:
        """folder/<random hex><original extension>"""
        suffix = Path(filename).suffix.lower()
        return f"{folder.strip('/')}/{uuid4().hex}{suffix}"

    def public_url(self, key: str) -> str:
        if self._mode == "local":
            return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/uploads/{key}"
        if settings.USE_MINIO:
            return f"http://{settings.MINIO_ENDPOINT}/{self._bucket_name}/{key}"
        return f"https://{self._bucket_name}.s3.{settings.AWS_REGION}.amazonaws.com/{key}"

    def key_from_url(self, url: str) -> Optional[str]:
        """Inverse of public_url; None for URLs this service did not issue"""
        path = urlparse(url).path.lstrip('/')
        if self._mode == "local":
            prefix = "uploads/"
        elif settings.USE_MINIO:
            prefix = f"{self._bucket_name}/"
        else:
            prefix = ""
        if not path.startswith(prefix) or not path[len(prefix):]:
            return None
        return path[len(prefix):]

    async def upload(self, content: bytes, filename: str, content_type: Optional[str] = None,
                     folder: str = "documents") -> str:
        """Store one file and return its public URL"""
        key = self.generate_key(folder, filename)
        content_type = content_type or mimetypes.guess_type(filename)[0] or 'application/octet-stream'

        if self._mode == "local":
            target = settings.upload_path / key
            target.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(target, 'wb') as f:
                await f.write(content)
        else:
            client = self._get_client()

            def put_sync():
                client.put_object(
                    Bucket=self._bucket_name,
                    Key=key,
                    Body=content,
                    ContentType=content_type,
                )

            await asyncio.get_event_loop().run_in_executor(None, put_sync)

        return self.public_url(key)

    async def delete(self, url: str) -> bool:
        """Remove a stored file by URL. Returns False if nothing was removed."""
        key = self.key_from_url(url)
        if key is None:
            return False

        if self._mode == "local":
            target = settings.upload_path / key
            if not target.is_file():
                return False
            target.unlink()
            return True

        client = self._get_client()
        await asyncio.get_event_loop().run_in_executor(
            None, lambda: client.delete_object(Bucket=self._bucket_name, Key=key)
        )
        return True

    async def upload_many(self, documents: Dict[str, UploadedDocument], folder: str) -> Dict[str, str]:
        """
        Upload all documents concurrently and return field name -> URL.

        Uploads are started together and awaited jointly. If any of them
        fails, the ones that did succeed are deleted again and UploadError
        is raised, so callers never reference a partial set.
        """
        if not documents:
            return {}

        fields = list(documents.keys())
        results = await asyncio.gather(
            *(
                self.upload(doc.content, doc.filename, doc.content_type, folder)
                for doc in documents.values()
            ),
            return_exceptions=True,
        )

        urls: Dict[str, str] = {}
        failed = []
        for field_name, result in zip(fields, results):
            doc = documents[field_name]
            if isinstance(result, BaseException):
                failed.append(field_name)
                logger.log_upload_event(field_name, success=False, size_bytes=doc.size_bytes,
                                        error=str(result))
            else:
                urls[field_name] = result
                logger.log_upload_event(field_name, success=True, size_bytes=doc.size_bytes, url=result)

        if failed:
            await self.discard(urls.values())
            raise UploadError(failed, message=f"{len(failed)} of {len(fields)} uploads failed")

        return urls

    async def discard(self, urls) -> None:
        """Best-effort cleanup of files that will not be referenced"""
        for url in list(urls):
            try:
                await self.delete(url)
            except (OSError, ClientError) as e:
                logger.warning(f"[Storage] Could not remove orphaned upload {url}: {e}")


def dated_folder(prefix: str) -> str:
    """prefix/YYYY/MM used for anonymous uploads"""
    now = datetime.utcnow()
    return f"{prefix}/{now:%Y}/{now:%m}"


storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """FastAPI dependency returning the process-wide storage service"""
    global storage_service
    if storage_service is None:
        storage_service = StorageService()
    return storage_service
