"""Pytest fixtures for zalopy tests."""
import asyncio
import base64
import json
import os
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import aiohttp
import pytest
from Crypto.Random import get_random_bytes
from PIL import Image

from zalopy.core.api.request import RequestBuilder
from zalopy.core.context import AppContext, ShareFileSettings
from zalopy.core.crypto import ParamsCipher


SERVICE_URL = "https://files.example.com/api"


class _BodyCollector:
    """Minimal stream writer that keeps everything written to it."""

    def __init__(self):
        self.parts = []

    async def write(self, data):
        self.parts.append(bytes(data))


async def chunk_content(form: aiohttp.FormData) -> bytes:
    """Serialize a one-part multipart form and return the part payload."""
    writer = form()
    collector = _BodyCollector()
    await writer.write(collector)
    body = b"".join(collector.parts)
    closing = b"\r\n--" + writer.boundary.encode() + b"--"
    return body.split(b"\r\n\r\n", 1)[1].rsplit(closing, 1)[0]


class FakeApiClient:
    """
    Stand-in for AsyncAPIClient.

    The responder receives the decrypted parameters of each request and
    returns the response data (or an exception to raise).
    """

    def __init__(self, secret_key, responder=None, delay=0.0):
        self._cipher = ParamsCipher(secret_key)
        self._builder = RequestBuilder(637, 30)
        self._responder = responder or (lambda params: {'fileId': -1})
        self._delay = delay
        self.calls = []
        self.chunks = []
        self.in_flight = 0
        self.max_in_flight = 0

    def build_url(self, base_url, params=None):
        return self._builder.build_url(base_url, params)

    def decode_params(self, url):
        query = parse_qs(urlsplit(url).query)
        return json.loads(self._cipher.decrypt(query['params'][0]))

    async def post(self, url, data=None, encrypted=True):
        params = self.decode_params(url)
        self.calls.append((url, params))
        if isinstance(data, aiohttp.FormData):
            self.chunks.append((params, await chunk_content(data)))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._delay)
        finally:
            self.in_flight -= 1
        result = self._responder(params)
        if isinstance(result, Exception):
            raise result
        return result


def final_chunk_responder(final_response, intermediate=None):
    """Answer the last chunk of each file with final_response, others with a sentinel."""
    def responder(params):
        if params['chunkId'] == params['totalChunk']:
            return dict(final_response)
        return dict(intermediate or {'fileId': -1})
    return responder


@pytest.fixture
def secret_key():
    """Generates a base64 32-byte session key for testing."""
    return base64.b64encode(get_random_bytes(32)).decode()


@pytest.fixture
def settings():
    """Share-file settings with a small chunk size."""
    return ShareFileSettings(
        max_file=5,
        max_size_share_file_v3=1,
        restricted_ext_file=['exe', 'bat'],
        chunk_size_file=1024
    )


@pytest.fixture
def context(secret_key, settings):
    """Fully populated session context."""
    return AppContext(
        secret_key=secret_key,
        imei="test-imei-0001",
        cookie="zpw_sek=abc",
        user_agent="Mozilla/5.0 test",
        uid="42",
        settings=settings
    )


@pytest.fixture
def make_file(tmp_path):
    """Factory writing a file with the given name and content."""
    def _make(name: str, content: bytes) -> Path:
        path = tmp_path / name
        path.write_bytes(content)
        return path
    return _make


@pytest.fixture
def make_image(tmp_path):
    """Factory writing a noisy image that does not compress well."""
    def _make(name: str = "photo.png", size=(40, 30)) -> Path:
        path = tmp_path / name
        img = Image.frombytes('RGB', size, os.urandom(size[0] * size[1] * 3))
        img.save(path)
        return path
    return _make


@pytest.fixture
def fake_api(secret_key):
    """Factory for FakeApiClient bound to the test session key."""
    def _make(responder=None, delay=0.0) -> FakeApiClient:
        return FakeApiClient(secret_key, responder, delay)
    return _make


@pytest.fixture
def final_responder():
    """The final_chunk_responder helper."""
    return final_chunk_responder
