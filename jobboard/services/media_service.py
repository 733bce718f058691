"""
Resume image pipeline.

Resizes and re-encodes uploaded resume images with Pillow and uploads them to
Cloudinary's REST upload API.
"""
import base64
import hashlib
import io
import logging
import time
from typing import Optional

import requests
from PIL import Image, ImageOps, UnidentifiedImageError

from jobboard.core import config
from jobboard.core.errors import InvalidRequest, UpstreamServiceError
from jobboard.core.logging_config import sanitize_log_data

logger = logging.getLogger(__name__)

RESUME_MAX_SIZE = (1000, 1000)
RESUME_JPEG_QUALITY = 80
CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


def optimize_resume_image(data: bytes) -> bytes:
    """
    Fit an image inside 1000x1000 (aspect ratio kept) and re-encode it as JPEG.

    Images already inside the box are re-encoded but not enlarged.

    Raises:
        InvalidRequest: If the bytes are not a decodable image
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image = ImageOps.exif_transpose(image)
            if image.mode != "RGB":
                image = image.convert("RGB")
            image.thumbnail(RESUME_MAX_SIZE, Image.LANCZOS)

            output = io.BytesIO()
            image.save(output, format="JPEG", quality=RESUME_JPEG_QUALITY, optimize=True)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        logger.warning(f"Could not decode resume image: {e}")
        raise InvalidRequest("Resume must be an image")

    return output.getvalue()


def sign_upload_params(params: dict, api_secret: str) -> str:
    """
    Compute a Cloudinary request signature.

    Parameters are sorted by name, joined as key=value pairs with '&', and
    the API secret is appended before hashing with SHA-1.
    """
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, ""))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryUploader:
    """Signed image uploads to a Cloudinary account."""

    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def upload_image(self, data: bytes, folder: str) -> Optional[str]:
        """
        Upload JPEG bytes into folder.

        Returns:
            The secure URL of the hosted image, or None if the answer carried none

        Raises:
            UpstreamServiceError: If credentials are missing or the request fails
        """
        if not self.configured:
            logger.error("Cloudinary credentials are not configured")
            raise UpstreamServiceError("Failed to upload resume image")

        params = {"folder": folder, "timestamp": int(time.time())}
        payload = dict(params)
        payload["api_key"] = self.api_key
        payload["signature"] = sign_upload_params(params, self.api_secret)
        payload["file"] = "data:image/jpeg;base64," + base64.b64encode(data).decode("ascii")

        url = CLOUDINARY_UPLOAD_URL.format(cloud_name=self.cloud_name)
        try:
            response = self.session.post(url, data=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(
                f"Cloudinary upload failed: {e} params={sanitize_log_data(payload)}",
                exc_info=True,
            )
            raise UpstreamServiceError("Failed to upload resume image")

        secure_url = body.get("secure_url") if isinstance(body, dict) else None
        if not secure_url:
            logger.error(f"Cloudinary answered without a secure_url: {body}")
            return None

        logger.info(f"Resume image uploaded: public_id={body.get('public_id')}, bytes={len(data)}")
        return secure_url


def get_resume_uploader() -> CloudinaryUploader:
    """FastAPI dependency that builds the uploader from configuration."""
    return CloudinaryUploader(
        cloud_name=config.CLOUDINARY_CLOUD_NAME,
        api_key=config.CLOUDINARY_API_KEY,
        api_secret=config.CLOUDINARY_API_SECRET,
        timeout=config.MEDIA_UPLOAD_TIMEOUT,
    )
