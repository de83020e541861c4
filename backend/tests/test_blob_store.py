import asyncio
import hashlib
import unittest
from types import SimpleNamespace
from unittest.mock import patch

import httpx

from media_catalog.services.blob_store import (
    BlobStoreConfigError,
    CloudinaryBlobStore,
    UploadError,
    sign_params,
)

EMPTY_SETTINGS = SimpleNamespace(
    CLOUDINARY_CLOUD_NAME="",
    CLOUDINARY_API_KEY="",
    CLOUDINARY_API_SECRET="",
    UPLOAD_TIMEOUT_SECONDS=5.0,
)


def _store(handler) -> CloudinaryBlobStore:
    return CloudinaryBlobStore(
        cloud_name="demo",
        api_key="key-123",
        api_secret="shh",
        transport=httpx.MockTransport(handler),
    )


class TestSignParams(unittest.TestCase):
    def test_signature_sorts_params_and_appends_secret(self) -> None:
        expected = hashlib.sha1(b"folder=posters&timestamp=1700000000shh").hexdigest()
        self.assertEqual(
            sign_params({"timestamp": "1700000000", "folder": "posters"}, "shh"),
            expected,
        )


class TestCloudinaryBlobStore(unittest.TestCase):
    def test_store_returns_secure_url(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            request.read()
            seen.append(request)
            return httpx.Response(
                200,
                json={"secure_url": "https://res.cloudinary.com/demo/image/upload/x.jpg"},
            )

        url = asyncio.run(_store(handler).store(b"img", "x.jpg", "stive-school/netflix"))

        self.assertEqual(url, "https://res.cloudinary.com/demo/image/upload/x.jpg")
        self.assertEqual(len(seen), 1)
        request = seen[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.url.path, "/v1_1/demo/image/upload")
        self.assertIn(b"stive-school/netflix", request.content)
        self.assertIn(b"key-123", request.content)
        self.assertIn(b'name="signature"', request.content)
        self.assertIn(b'filename="x.jpg"', request.content)

    def test_upstream_error_raises_upload_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": {"message": "nope"}})

        with self.assertRaises(UploadError):
            asyncio.run(_store(handler).store(b"img", "x.jpg", "posters"))

    def test_transport_error_raises_upload_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with self.assertRaises(UploadError):
            asyncio.run(_store(handler).store(b"img", "x.jpg", "posters"))

    def test_response_without_url_raises_upload_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"public_id": "x"})

        with self.assertRaises(UploadError):
            asyncio.run(_store(handler).store(b"img", "x.jpg", "posters"))

    def test_missing_credentials_raise_config_error(self) -> None:
        with patch("media_catalog.services.blob_store.settings", EMPTY_SETTINGS):
            store = CloudinaryBlobStore()
        with self.assertRaises(BlobStoreConfigError):
            asyncio.run(store.store(b"img", "x.jpg", "posters"))
