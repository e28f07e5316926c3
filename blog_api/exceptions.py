"""
Blog API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the different failure scenarios.
How:   Each exception class carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses with the matching HTTP status code.
Who:   Raised by services; caught by the global handlers.

Exception Hierarchy:
    BlogApiError (base)
    ├── ValidationError              → 422 Unprocessable Entity
    ├── NotFoundError                → 404 Not Found
    ├── ImageUploadError             → 500 "Image upload failed: ..."
    │   ├── InvalidImageFormatError  (not a data:image/<type>;base64, URI)
    │   ├── InvalidImageTypeError    (subtype outside the allow-list)
    │   ├── ImageDecodeError         (payload is not valid base64)
    │   ├── ImageSizeLimitError      (decoded payload over the size limit)
    │   └── FileStorageError         (disk write failed)
    └── DatabaseError                → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional


class BlogApiError(Exception):
    """
    Base exception for all Blog API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BlogApiError):
    """
    Raised when client input fails validation.

    HTTP:    422 Unprocessable Entity

    Carries field-level messages in the same shape the API returns them:
        {"title": ["The title field is required."]}
    """

    def __init__(
        self,
        errors: Optional[Dict[str, List[str]]] = None,
        message: str = "The given data was invalid.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors = errors or {}


class NotFoundError(BlogApiError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/PATCH/DELETE /blogs/{id} with an unknown id.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ImageUploadError(BlogApiError):
    """
    Base class for every failure of the image persistence routine.

    HTTP:    500, body {"error": "Image upload failed: <message>"}
    """

    def __init__(
        self,
        message: str = "Image upload failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidImageFormatError(ImageUploadError):
    """The value is neither a URL nor a `data:image/<type>;base64,` URI."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid image format", context=context)


class InvalidImageTypeError(ImageUploadError):
    """The data URI declares an image subtype outside the allow-list."""

    def __init__(
        self,
        image_type: str,
        allowed: List[str],
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["image_type"] = image_type
        super().__init__(
            message=f"Invalid image type. Allowed: {', '.join(allowed)}",
            context=ctx,
        )
        self.image_type = image_type


class ImageDecodeError(ImageUploadError):
    """The base64 payload could not be decoded."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="base64_decode failed", context=context)


class ImageSizeLimitError(ImageUploadError):
    """The decoded image exceeds the configured byte limit."""

    def __init__(
        self,
        size: int,
        max_size: int,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx.update({"size": size, "max_size": max_size})
        max_mb = max_size / (1024 * 1024)
        super().__init__(
            message=f"Image size should be less than {max_mb:g}MB",
            context=ctx,
        )
        self.size = size
        self.max_size = max_size


class FileStorageError(ImageUploadError):
    """
    Raised when writing an image to the storage disk fails.

    When:    Disk full, permission denied, directory not writable, I/O error.
    """

    def __init__(
        self,
        message: str = "Failed to save uploaded image",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(BlogApiError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the original
    error type is kept in `context` and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
