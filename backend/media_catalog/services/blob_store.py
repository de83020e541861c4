"""
Poster Blob Store
─────────────────
Uploads image bytes to Cloudinary and hands back the public URL.

Flow:
  1. Client posts a multipart image to /media/{id}/upload.
  2. The handler passes the bytes here with the configured folder.
  3. The returned secure_url is stored as the entry's Poster.

The core never looks at file contents; anything that fails on the way to
Cloudinary surfaces as UploadError.
"""
import hashlib
import time

import httpx

from media_catalog.core.config import settings

CLOUDINARY_BASE_URL = "https://api.cloudinary.com/v1_1"


class UploadError(Exception):
    """Raised when the blob store cannot store a file."""


class BlobStoreConfigError(UploadError):
    """Raised when Cloudinary credentials are missing."""


def sign_params(params: dict[str, str], api_secret: str) -> str:
    """
    Cloudinary request signature.

    Params are sorted by key, joined as ``k=v`` pairs with ``&``, suffixed
    with the API secret and SHA-1 hashed.
    """
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] != "")
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryBlobStore:
    """
    Thin async wrapper around the Cloudinary upload API.
    Uses httpx for HTTP — non-blocking in async FastAPI context.
    """

    def __init__(
        self,
        cloud_name: str | None = None,
        api_key: str | None = None,
        api_secret: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cloud_name = cloud_name or settings.CLOUDINARY_CLOUD_NAME
        self.api_key = api_key or settings.CLOUDINARY_API_KEY
        self.api_secret = api_secret or settings.CLOUDINARY_API_SECRET
        self.timeout = timeout or settings.UPLOAD_TIMEOUT_SECONDS
        self._transport = transport

    def _check_config(self) -> None:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise BlobStoreConfigError(
                "Cloudinary credentials are not set. "
                "Add CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY and "
                "CLOUDINARY_API_SECRET to your .env file."
            )

    async def store(self, data: bytes, filename: str, namespace: str) -> str:
        """Upload *data* into folder *namespace* and return its public URL."""
        self._check_config()

        params = {"folder": namespace, "timestamp": str(int(time.time()))}
        form = {
            **params,
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret),
        }
        files = {"file": (filename or "upload", data)}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{CLOUDINARY_BASE_URL}/{self.cloud_name}/image/upload",
                    data=form,
                    files=files,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UploadError(
                f"Cloudinary upload failed with status {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            raise UploadError("Cloudinary upload request failed") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise UploadError("Cloudinary returned a non-JSON response") from exc

        url = None
        if isinstance(payload, dict):
            url = payload.get("secure_url") or payload.get("url")
        if not url:
            raise UploadError("Cloudinary response did not include a URL")
        return url
