"""
Image upload routes: local file storage and ImageKit client-upload signing.
"""
import hashlib
import hmac
import logging
import os
import secrets
import time
import uuid
from fastapi import APIRouter, Depends, File, Request, UploadFile
from typing import List, Optional
from app.core.config import settings
from app.core.exceptions import Forbidden, InternalError, NotFound, ValidationError
from app.models.user import User
from app.schemas.common import ResponseEnvelope
from app.schemas.upload import ImageKitAuthResponse, UploadResult
from app.api.dependencies import get_current_user
from app.services.image_service import LOCAL_UPLOAD_MARKER, LocalAssetLocator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
IMAGEKIT_SIGNATURE_TTL = 30 * 60  # ImageKit rejects expiries more than an hour ahead
UPLOAD_CHUNK_SIZE = 64 * 1024


def get_public_base_url(request: Request) -> str:
    """Base URL for links to uploaded files; production links are always https."""
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL.rstrip("/")
    scheme = request.headers.get("x-forwarded-proto") or request.url.scheme
    if settings.is_production:
        scheme = "https"
    host = request.headers.get("host") or request.url.netloc
    return f"{scheme}://{host}"


def generate_upload_filename(user_id: str, original_name: str) -> str:
    """<userId>-<millis>-<random><ext>; the user id prefix records the uploader."""
    ext = os.path.splitext(original_name or "")[1].lower()
    return f"{user_id}-{int(time.time() * 1000)}-{secrets.randbelow(10 ** 9)}{ext}"


async def read_upload(file: UploadFile, max_size: int) -> bytes:
    """Read an upload in chunks, rejecting it as soon as it passes max_size."""
    if file.size is not None and file.size > max_size:
        raise ValidationError(f"File too large: {file.filename}")

    chunks = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > max_size:
            raise ValidationError(f"File too large: {file.filename}")
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("", response_model=ResponseEnvelope[UploadResult], response_model_exclude_none=True)
async def upload_images(
    request: Request,
    images: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(get_current_user)
):
    """Upload up to MAX_UPLOAD_FILES images and return their public URLs."""
    if not images:
        raise ValidationError("No files uploaded")

    if len(images) > settings.MAX_UPLOAD_FILES:
        raise ValidationError(f"Too many files (maximum {settings.MAX_UPLOAD_FILES})")

    # Validate everything before writing anything
    pending = []
    for file in images:
        ext = os.path.splitext(file.filename or "")[1].lower()
        if file.content_type not in settings.ALLOWED_IMAGE_TYPES or ext not in ALLOWED_EXTENSIONS:
            raise ValidationError("Only image files are allowed!")

        content = await read_upload(file, settings.MAX_UPLOAD_SIZE)
        pending.append((file.filename, content))

    upload_dir = settings.experience_upload_dir
    os.makedirs(upload_dir, exist_ok=True)

    base_url = get_public_base_url(request)
    urls = []
    for original_name, content in pending:
        filename = generate_upload_filename(current_user.id, original_name)
        with open(os.path.join(upload_dir, filename), "wb") as buffer:
            buffer.write(content)
        urls.append(f"{base_url}{LOCAL_UPLOAD_MARKER}{filename}")

    logger.info(f"User {current_user.id} uploaded {len(urls)} image(s)")

    return ResponseEnvelope(
        message="Images uploaded successfully",
        data=UploadResult(urls=urls, count=len(urls))
    )


@router.delete("/{filename}", response_model=ResponseEnvelope, response_model_exclude_none=True)
async def delete_image(filename: str, current_user: User = Depends(get_current_user)):
    """Delete a locally stored image uploaded by the current user."""
    locator = LocalAssetLocator(settings.experience_upload_dir)
    file_path = locator.path_for(filename)

    if not file_path or not os.path.isfile(file_path):
        raise NotFound("File not found")

    if not os.path.basename(file_path).startswith(f"{current_user.id}-"):
        raise Forbidden("You can only delete your own images")

    os.remove(file_path)
    logger.info(f"User {current_user.id} deleted uploaded image {os.path.basename(file_path)}")

    return ResponseEnvelope(message="Image deleted successfully")


@router.post("/imagekit-auth", response_model=ResponseEnvelope[ImageKitAuthResponse], response_model_exclude_none=True)
async def imagekit_auth(current_user: User = Depends(get_current_user)):
    """
    Sign parameters for a direct browser upload to ImageKit.

    signature = HMAC-SHA1(private_key, token + expire), hex encoded.
    """
    if not settings.imagekit_enabled:
        logger.error("ImageKit auth requested but IMAGEKIT_PRIVATE_KEY/IMAGEKIT_URL_ENDPOINT are not set")
        raise InternalError("Image hosting is not configured")

    token = uuid.uuid4().hex
    expire = int(time.time()) + IMAGEKIT_SIGNATURE_TTL
    signature = hmac.new(
        settings.IMAGEKIT_PRIVATE_KEY.encode("utf-8"),
        f"{token}{expire}".encode("utf-8"),
        hashlib.sha1
    ).hexdigest()

    return ResponseEnvelope(data=ImageKitAuthResponse(
        token=token,
        expire=expire,
        signature=signature,
        public_key=settings.IMAGEKIT_PUBLIC_KEY,
        url_endpoint=settings.IMAGEKIT_URL_ENDPOINT,
    ))
