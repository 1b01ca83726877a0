"""
Image asset management: locate and delete the stored file behind an image URL.

An image URL is either hosted on ImageKit or stored on local disk under the
uploads directory. Each storage backend is an AssetLocator; the
ImageAssetManager picks the first locator that recognizes a URL and asks it
to delete the asset. Deletion is best-effort: failures are logged, never
raised, so callers can clean up without risking their own operation.
"""
import logging
import os
from typing import Dict, List, Optional, Sequence
import httpx
from app.core.config import Settings
from app.core.utils import last_path_segment, url_host

logger = logging.getLogger(__name__)

LOCAL_UPLOAD_MARKER = "/uploads/experiences/"


class AssetLocator:
    """Resolves an image URL to a stored asset and deletes it."""

    name = "asset"

    def matches(self, url: str) -> bool:
        raise NotImplementedError

    def delete(self, url: str) -> bool:
        """Delete the asset behind `url`. Returns False if nothing was found."""
        raise NotImplementedError


class LocalAssetLocator(AssetLocator):
    """Files written by the upload route to <UPLOAD_ROOT>/experiences/."""

    name = "local"

    def __init__(self, upload_dir: str, marker: str = LOCAL_UPLOAD_MARKER):
        self.upload_dir = upload_dir
        self.marker = marker

    def matches(self, url: str) -> bool:
        return self.marker in url

    def filename_for(self, url: str) -> str:
        suffix = url.split(self.marker, 1)[-1]
        suffix = suffix.split("?", 1)[0].split("#", 1)[0]
        # basename() keeps lookups inside the upload directory
        return os.path.basename(suffix)

    def path_for(self, filename: str) -> Optional[str]:
        filename = os.path.basename(filename)
        if not filename:
            return None
        return os.path.join(self.upload_dir, filename)

    def delete(self, url: str) -> bool:
        file_path = self.path_for(self.filename_for(url))
        if not file_path or not os.path.isfile(file_path):
            return False
        os.remove(file_path)
        return True


class ImageKitAssetLocator(AssetLocator):
    """
    Images hosted on ImageKit.

    ImageKit deletes by fileId, which is not stored with the experience, so
    the id is looked up from the URL: first by exact file name, then by
    scanning the upload folder.
    """

    name = "imagekit"

    def __init__(
        self,
        client: httpx.Client,
        url_endpoint: str,
        folder: str = "/experiences/",
    ):
        self.client = client
        self.host = url_host(url_endpoint)
        self.folder = folder

    def matches(self, url: str) -> bool:
        return bool(self.host) and url_host(url) == self.host

    def _list_files(self, params: Dict) -> List[Dict]:
        response = self.client.get("/files", params=params)
        response.raise_for_status()
        return response.json()

    def find_by_name(self, filename: str) -> Optional[Dict]:
        """Primary lookup: exact name search."""
        matches = self._list_files({"searchQuery": f'name = "{filename}"'})
        return matches[0] if matches else None

    def find_in_folder(self, url: str, filename: str) -> Optional[Dict]:
        """Fallback lookup: scan the upload folder for a file matching the URL."""
        files = self._list_files({"path": self.folder, "limit": 1000})
        for entry in files:
            name = entry.get("name") or ""
            if entry.get("url") == url or name == filename or (name and name in url):
                return entry
        return None

    def resolve_file_id(self, url: str) -> Optional[str]:
        filename = last_path_segment(url)
        entry = None
        if filename:
            entry = self.find_by_name(filename)
        if entry is None:
            logger.debug(f"No ImageKit file named '{filename}', scanning {self.folder}")
            entry = self.find_in_folder(url, filename)
        return entry.get("fileId") if entry else None

    def delete(self, url: str) -> bool:
        file_id = self.resolve_file_id(url)
        if not file_id:
            return False
        response = self.client.delete(f"/files/{file_id}")
        response.raise_for_status()
        return True


class ImageAssetManager:
    """Best-effort deletion of image assets across storage backends."""

    def __init__(self, locators: Sequence[AssetLocator]):
        self.locators = list(locators)

    def locator_for(self, url: str) -> Optional[AssetLocator]:
        for locator in self.locators:
            if locator.matches(url):
                return locator
        return None

    def delete_asset(self, url: str) -> None:
        """Delete the asset behind `url`. Never raises."""
        if not url:
            return
        locator = self.locator_for(url)
        if locator is None:
            logger.debug(f"Unrecognized image reference, skipping: {url}")
            return
        try:
            if locator.delete(url):
                logger.info(f"Deleted {locator.name} image asset: {url}")
            else:
                logger.warning(f"{locator.name} image asset not found, presumed already deleted: {url}")
        except httpx.HTTPStatusError as e:
            logger.error(f"{locator.name} API error deleting {url}: {e.response.status_code} - {e.response.text}")
        except Exception as e:
            logger.error(f"Failed to delete {locator.name} image asset {url}: {e}", exc_info=True)


def build_imagekit_client(settings: Settings) -> httpx.Client:
    """HTTP client for the ImageKit management API (private key as basic-auth user)."""
    return httpx.Client(
        base_url=settings.IMAGEKIT_API_URL,
        auth=(settings.IMAGEKIT_PRIVATE_KEY, ""),
        timeout=settings.IMAGEKIT_TIMEOUT,
    )


def build_image_asset_manager(settings: Settings) -> ImageAssetManager:
    """Wire the locators enabled by configuration."""
    locators: List[AssetLocator] = []
    if settings.imagekit_enabled:
        locators.append(ImageKitAssetLocator(
            build_imagekit_client(settings),
            settings.IMAGEKIT_URL_ENDPOINT,
            settings.IMAGEKIT_FOLDER,
        ))
    else:
        logger.warning("ImageKit is not configured; CDN-hosted images will not be cleaned up.")
    locators.append(LocalAssetLocator(settings.experience_upload_dir))
    return ImageAssetManager(locators)


def upgrade_insecure_url(url: str, host_suffix: str) -> str:
    """Rewrite http:// to https:// for URLs whose host ends with `host_suffix`."""
    if url.startswith("http://") and url_host(url).endswith(host_suffix):
        return "https://" + url[len("http://"):]
    return url
