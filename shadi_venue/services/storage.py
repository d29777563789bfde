"""
Storage Service - Cloudflare R2 Integration
Provides a unified interface for invite image storage.
Supports both R2 (production) and local filesystem (fallback).
"""

import aioboto3
import asyncio
import logging
import os
from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple, List
from PIL import Image, UnidentifiedImageError

from shadi_venue.core.config import UPLOAD_DIR, MAX_UPLOAD_SIZE, upload_semaphore
from shadi_venue.core.errors import InvalidArgumentError, UpstreamError
from shadi_venue.utils.helpers import build_upload_key

logger = logging.getLogger(__name__)

# R2 Configuration from environment
R2_ACCESS_KEY_ID = os.environ.get('R2_ACCESS_KEY_ID', '')
R2_SECRET_ACCESS_KEY = os.environ.get('R2_SECRET_ACCESS_KEY', '')
R2_ENDPOINT_URL = os.environ.get('R2_ENDPOINT_URL', '')
R2_PUBLIC_URL = os.environ.get('R2_PUBLIC_URL', '')
R2_BUCKET_NAME = os.environ.get('R2_BUCKET_NAME', 'shadi-venue-invites')

# Check if R2 is configured
R2_ENABLED = bool(R2_ACCESS_KEY_ID and R2_SECRET_ACCESS_KEY and R2_ENDPOINT_URL)

LOCAL_SERVE_PREFIX = "/api/uploads"


class StorageService:
    """
    Unified storage service that abstracts R2 and local filesystem operations.
    """

    def __init__(self, upload_dir: Optional[Path] = None, r2_enabled: bool = R2_ENABLED):
        self.r2_enabled = r2_enabled
        self.upload_dir = Path(upload_dir) if upload_dir is not None else UPLOAD_DIR
        if self.r2_enabled:
            self.session = aioboto3.Session(
                aws_access_key_id=R2_ACCESS_KEY_ID,
                aws_secret_access_key=R2_SECRET_ACCESS_KEY,
            )
            logger.info(f"R2 Storage initialized - Bucket: {R2_BUCKET_NAME}")
        else:
            self.session = None
            logger.warning(f"R2 not configured - using local filesystem at {self.upload_dir}")

    def get_public_url(self, key: str) -> str:
        """Get the public URL for a file"""
        if self.r2_enabled and R2_PUBLIC_URL:
            return f"{R2_PUBLIC_URL}/{key}"
        return f"{LOCAL_SERVE_PREFIX}/{key}"

    def _local_path(self, key: str) -> Path:
        root = self.upload_dir.resolve()
        file_path = (root / key).resolve()
        if root != file_path and root not in file_path.parents:
            raise InvalidArgumentError(f"Invalid storage key: {key}")
        return file_path

    async def upload_file(
        self,
        key: str,
        content: bytes,
        content_type: str = 'image/jpeg'
    ) -> Tuple[bool, str]:
        """
        Upload a file to storage.
        Returns (success, url/error_message)
        """
        if self.r2_enabled:
            return await self._upload_to_r2(key, content, content_type)
        else:
            return await self._upload_to_local(key, content)

    async def _upload_to_r2(
        self,
        key: str,
        content: bytes,
        content_type: str
    ) -> Tuple[bool, str]:
        """Upload file to Cloudflare R2"""
        try:
            async with self.session.client(
                "s3",
                endpoint_url=R2_ENDPOINT_URL,
                region_name="auto"
            ) as s3_client:
                await s3_client.put_object(
                    Bucket=R2_BUCKET_NAME,
                    Key=key,
                    Body=content,
                    ContentType=content_type,
                )
                url = self.get_public_url(key)
                logger.info(f"Uploaded to R2: {key}")
                return True, url
        except Exception as e:
            logger.error(f"R2 upload failed for {key}: {e}")
            return False, str(e)

    async def _upload_to_local(
        self,
        key: str,
        content: bytes
    ) -> Tuple[bool, str]:
        """Upload file to local filesystem (fallback)"""
        try:
            file_path = self._local_path(key)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'wb') as f:
                f.write(content)
            logger.info(f"Stored locally: {key}")
            return True, self.get_public_url(key)
        except OSError as e:
            logger.error(f"Local upload failed for {key}: {e}")
            return False, str(e)

    async def delete_file(self, key: str) -> bool:
        """Delete a file from storage"""
        if self.r2_enabled:
            return await self._delete_from_r2(key)
        else:
            return await self._delete_from_local(key)

    async def _delete_from_r2(self, key: str) -> bool:
        """Delete file from R2"""
        try:
            async with self.session.client(
                "s3",
                endpoint_url=R2_ENDPOINT_URL,
                region_name="auto"
            ) as s3_client:
                await s3_client.delete_object(
                    Bucket=R2_BUCKET_NAME,
                    Key=key
                )
                logger.info(f"Deleted from R2: {key}")
                return True
        except Exception as e:
            logger.error(f"R2 delete failed for {key}: {e}")
            return False

    async def _delete_from_local(self, key: str) -> bool:
        """Delete file from local filesystem"""
        try:
            file_path = self._local_path(key)
            if file_path.exists():
                file_path.unlink()
                logger.info(f"Deleted local file: {file_path}")
            return True
        except OSError as e:
            logger.error(f"Local delete failed for {key}: {e}")
            return False

    async def get_file(self, key: str) -> Optional[bytes]:
        """Get file content from local storage; R2 objects are served by their public URL"""
        file_path = self._local_path(key)
        if file_path.is_file():
            with open(file_path, 'rb') as f:
                return f.read()
        return None

    @staticmethod
    def validate_image(filename: str, content: bytes) -> None:
        """Reject empty, oversized or non-image uploads"""
        if not content:
            raise InvalidArgumentError(f"Uploaded file '{filename}' is empty")
        if len(content) > MAX_UPLOAD_SIZE:
            raise InvalidArgumentError(f"Uploaded file '{filename}' is too large")
        try:
            with Image.open(BytesIO(content)) as img:
                img.verify()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError):
            raise InvalidArgumentError(f"Only image files are allowed: '{filename}'")

    async def upload_images(self, files: List[Tuple[str, bytes, str]]) -> List[str]:
        """
        Upload (filename, content, content_type) images concurrently.
        Returns URLs in input order. If any upload fails the ones that
        succeeded are deleted again and UpstreamError is raised.
        """
        for filename, content, _ in files:
            self.validate_image(filename, content)

        async def upload_one(filename: str, content: bytes, content_type: str):
            key = build_upload_key(filename)
            async with upload_semaphore:
                success, url_or_error = await self.upload_file(key, content, content_type or 'image/jpeg')
            return key, success, url_or_error

        results = await asyncio.gather(*[upload_one(*item) for item in files])

        failed = [(key, error) for key, success, error in results if not success]
        if failed:
            for key, success, _ in results:
                if success:
                    await self.delete_file(key)
            logger.error(f"Image upload failed for {len(failed)} of {len(files)} files")
            raise UpstreamError("Failed to upload images", failed=[key for key, _ in failed])

        return [url for _, _, url in results]


# Global storage instance
storage_service = StorageService()
