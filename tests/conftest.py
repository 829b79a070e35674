"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import json
import httpx
import pytest
import pytest_asyncio

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.append(project_root)

from terrain_viewer.client import ImageServiceClient
from terrain_viewer.schemas import LatLng, MapBounds

ENDPOINT = "http://127.0.0.1:8000/api/image"


class FakeSessionStore:
    """Stands in for cl.user_session."""

    def __init__(self, data=None):
        self.data = dict(data or {})

    def get(self, key, default=None):
        return self.data.get(key, default)

    def set(self, key, value):
        self.data[key] = value


class StaticMap:
    """A map widget frozen on one viewport."""

    def __init__(self, north_west, south_east, zoom):
        self.bounds = MapBounds(
            north_west=LatLng(lng=north_west[0], lat=north_west[1]),
            south_east=LatLng(lng=south_east[0], lat=south_east[1])
        )
        self.zoom = zoom

    def get_bounds(self):
        return self.bounds

    def get_zoom(self):
        return self.zoom


class RecordingService:
    """MockTransport handler that remembers every request it served."""

    def __init__(self, status_code=200, body=None, error=None):
        self.status_code = status_code
        self.body = {"image_path": "x.png"} if body is None else body
        self.error = error
        self.requests = []

    @property
    def payloads(self):
        return [json.loads(request.content) for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(f"{self.error.__name__} raised by test", request=request)
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=self.body)


class RecordingSink:
    """Display sink that remembers what it was asked to draw."""

    def __init__(self):
        self.calls = []

    async def show_loading(self, option):
        self.calls.append(("show_loading", option))

    async def hide_loading(self):
        self.calls.append(("hide_loading",))

    async def show_image(self, src):
        self.calls.append(("show_image", src))


@pytest.fixture
def store():
    return FakeSessionStore()


@pytest.fixture
def static_map():
    return StaticMap(north_west=(1.0, 46.0), south_east=(2.0, 45.0), zoom=10)


@pytest.fixture
def service():
    return RecordingService()


@pytest_asyncio.fixture
async def client(service):
    """Create an image service client backed by the recording service."""
    client = ImageServiceClient(endpoint=ENDPOINT, transport=httpx.MockTransport(service))
    try:
        yield client
    finally:
        await client.close()
