"""
Blog API — Image Storage Service
==================================

What:  Decodes base64 data-URI images, stores them on the public storage disk,
       deletes replaced images and builds absolute image URLs.
How:   The data URI is checked (prefix, subtype, base64, size) before anything
       touches the disk; files get a timestamp + random token name under the
       fixed `blogs/` directory; the relative public path is returned.
Who:   Called by BlogService on create, update and delete.

Value formats handled:
    https://cdn.example.com/a.png        → a URL, stored and returned untouched
    data:image/png;base64,iVBORw0KGgo... → decoded and written to disk
    storage/blogs/blog_1700000000_ab12.png
                                         → relative public path (what we store)

Public storage disk layout:
    <storage_root>/
    └── blogs/
        ├── blog_1700000000_6f1c2d9e8a7b4.png
        └── blog_1700000042_0b9e4f11c3d2a.webp

    served as  <asset base>/storage/blogs/<file>
"""

import base64
import binascii
import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import aiofiles
import aiofiles.os
from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from blog_api.config import settings
from blog_api.exceptions import (
    FileStorageError,
    ImageDecodeError,
    ImageSizeLimitError,
    InvalidImageFormatError,
    InvalidImageTypeError,
)

logger = logging.getLogger(__name__)

# ── Image Rules ───────────────────────────────────────────────────────────
# Subtypes accepted in data:image/<type>;base64, URIs; the subtype doubles as
# the stored file's extension
ALLOWED_IMAGE_TYPES = ("jpg", "jpeg", "png", "gif", "webp")

DATA_URI_PATTERN = re.compile(r"^data:image/(\w+);base64,", re.ASCII)
BASE64_JUNK = re.compile(r"[^A-Za-z0-9+/]")

# scheme://authority, with a non-empty authority
URL_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://[^/?#]+")

# ── Storage Layout ────────────────────────────────────────────────────────
# URL prefix under which the public storage disk is served
PUBLIC_PREFIX = "storage"
# Directory on the public disk holding blog images
BLOG_IMAGE_DIR = "blogs"

_url_adapter = TypeAdapter(AnyUrl)


def is_url(value: Optional[str]) -> bool:
    """
    True when `value` is an absolute URL with a host (http://, https://, ftp://...).

    Data URIs and relative storage paths are not URLs, and neither are
    values AnyUrl would repair into one (http:example.com, http:/x).
    """
    if not value or value.startswith("data:"):
        return False
    if any(ch.isspace() for ch in value) or not URL_PATTERN.match(value):
        return False
    try:
        url = _url_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return url.host is not None


class ImageService:
    """
    Manages the blog image lifecycle on the public storage disk.

    Lifecycle of a submitted image value:
        1. URL → returned unchanged, nothing written
        2. Data URI → prefix, subtype, base64 and size checks
        3. Previous local image (if any) is deleted
        4. Bytes written to <storage_root>/blogs/<unique name>
        5. Relative path storage/blogs/<unique name> returned (stored in DB)
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the public disk root (used in tests).
                          If None, uses settings.storage_root.
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("ImageService initialized with storage_root=%s", self.storage_root)

    # ── Decoding ──────────────────────────────────────────────────────────

    def decode_data_uri(self, image: str) -> Tuple[str, bytes]:
        """
        Validate a base64 data URI and return (image_type, decoded_bytes).

        Checks, in order:
            1. data:image/<type>;base64, prefix  → InvalidImageFormatError
            2. <type> in ALLOWED_IMAGE_TYPES     → InvalidImageTypeError
            3. payload is base64                 → ImageDecodeError
            4. decoded size <= max_image_size    → ImageSizeLimitError

        Spaces in the payload are turned back into '+' first: form encoders
        deliver '+' as a space. Unpadded payloads are accepted.
        """
        match = DATA_URI_PATTERN.match(image)
        if match is None:
            raise InvalidImageFormatError()

        image_type = match.group(1).lower()
        if image_type not in ALLOWED_IMAGE_TYPES:
            raise InvalidImageTypeError(image_type, list(ALLOWED_IMAGE_TYPES))

        payload = image[image.index(",") + 1:].replace(" ", "+")
        # Non-alphabet characters are skipped and missing '=' padding restored
        payload = BASE64_JUNK.sub("", payload)
        payload += "=" * (-len(payload) % 4)
        try:
            content = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageDecodeError(context={"error": str(e)})
        if not content:
            raise ImageDecodeError(context={"error": "empty payload"})

        if len(content) > settings.max_image_size:
            raise ImageSizeLimitError(len(content), settings.max_image_size)

        return image_type, content

    # ── Storage ───────────────────────────────────────────────────────────

    def _generate_filename(self, image_type: str) -> str:
        """blog_<unix seconds>_<13 hex chars>.<type>"""
        timestamp = int(datetime.now(timezone.utc).timestamp())
        token = uuid.uuid4().hex[:13]
        return f"blog_{timestamp}_{token}.{image_type}"

    async def write_image(self, content: bytes, image_type: str) -> str:
        """
        Write decoded image bytes to the blogs directory.

        Returns: Relative public path (storage/blogs/<file>).
        Raises:  FileStorageError if directory creation or the write fails.
        """
        filename = self._generate_filename(image_type)
        disk_path = f"{BLOG_IMAGE_DIR}/{filename}"
        absolute_path = self.storage_root / disk_path

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store image at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("Image stored: %s (%d bytes)", disk_path, len(content))
        return f"{PUBLIC_PREFIX}/{disk_path}"

    async def store_image(self, image: str, old_image: Optional[str] = None) -> str:
        """
        Persist a submitted image value and return what should be saved on the record.

        Args:
            image:     URL or base64 data URI from the request body
            old_image: The record's current image value (updates only)

        Returns:
            `image` itself when it is a URL, otherwise the relative path of
            the newly written file.

        The old image is only deleted once the new one has passed every
        check, and only when it is a local path; a URL submission leaves the
        old value alone.
        """
        if is_url(image):
            return image

        image_type, content = self.decode_data_uri(image)

        if old_image and not is_url(old_image):
            await self.delete_image(old_image)

        return await self.write_image(content, image_type)

    # ── Local Paths ───────────────────────────────────────────────────────

    def resolve_local_path(self, image: Optional[str]) -> Optional[Path]:
        """
        Map a stored image value to its file on the public disk.

        storage/blogs/x.png and /storage/blogs/x.png both resolve to
        <storage_root>/blogs/x.png. Returns None for URLs, empty values and
        paths that would escape the storage root.
        """
        if not image or is_url(image):
            return None

        relative = image.strip().lstrip("/")
        if relative.startswith(f"{PUBLIC_PREFIX}/"):
            relative = relative[len(PUBLIC_PREFIX) + 1:]
        if not relative:
            return None

        candidate = (self.storage_root / relative).resolve()
        if self.storage_root not in candidate.parents:
            logger.warning("Refusing to touch path outside storage root: %s", image)
            return None
        return candidate

    async def delete_image(self, image: Optional[str]) -> bool:
        """
        Delete a locally stored image, best-effort.

        Returns True when a file was removed. Missing files, URLs and
        unresolvable paths return False; OS errors are logged, never raised.
        """
        path = self.resolve_local_path(image)
        if path is None:
            return False

        try:
            if not await aiofiles.os.path.exists(path):
                logger.debug("Delete: image already gone: %s", path.name)
                return False
            await aiofiles.os.remove(path)
            logger.info("Deleted image: %s", path.name)
            return True
        except OSError as e:
            logger.warning("Failed to delete image %s: %s", image, str(e))
            return False

    # ── Public URLs ───────────────────────────────────────────────────────

    def public_url(self, image: Optional[str], base_url: str) -> Optional[str]:
        """
        Absolute URL for an image value.

        URLs and empty values are returned unchanged; relative paths are
        joined onto settings.asset_url, or onto `base_url` (the request's
        base URL) when no asset URL is configured.
        """
        if not image or is_url(image):
            return image
        base = settings.asset_url or base_url.rstrip("/")
        return f"{base}/{image.lstrip('/')}"


# ── Singleton Instance ────────────────────────────────────────────────────
image_service = ImageService()
