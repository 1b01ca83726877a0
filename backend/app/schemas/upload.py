"""
Pydantic schemas for image upload.
"""
from typing import List
from app.schemas.common import CamelModel


class UploadResult(CamelModel):
    urls: List[str]
    count: int


class ImageKitAuthResponse(CamelModel):
    """Signed parameters for a client-side upload to ImageKit."""
    token: str
    expire: int
    signature: str
    public_key: str
    url_endpoint: str
