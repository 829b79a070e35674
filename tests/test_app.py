"""
Tests for the Chainlit handlers, with the chat runtime replaced by mocks.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio

from terrain_viewer import app
from terrain_viewer.config import MapConfig, UserSettings
from terrain_viewer.models import ViewerState
from terrain_viewer.presenter import ResultPresenter
from terrain_viewer.session_manager import SessionManager
from terrain_viewer.viewport import MapView
from tests.conftest import FakeSessionStore, RecordingSink

BROWSER_REPORT = {"north": 46.0, "south": 45.0, "east": 2.0, "west": 1.0, "zoom": 10}


@pytest_asyncio.fixture
async def chat(client):
    """A chat session as on_chat_start would leave it, before the map reports."""
    store = FakeSessionStore()
    store.set("session_id", "test-session")
    store.set("settings", UserSettings())
    store.set("session", SessionManager(ViewerState, store))
    store.set("map_view", MapView(MapConfig()))
    store.set("image_client", client)
    store.set("presenter", ResultPresenter(RecordingSink()))

    mock_cl = MagicMock()
    mock_cl.user_session = store
    mock_cl.Message.return_value.send = AsyncMock()
    with patch("terrain_viewer.app.cl", mock_cl):
        yield SimpleNamespace(store=store, cl=mock_cl)


def action(**payload):
    return SimpleNamespace(id="action-1", payload=payload)


@pytest.mark.asyncio
async def test_generate_sends_option_selected_before_click(chat, service):
    await app.on_viewport_changed(action(**BROWSER_REPORT))
    await app.on_select_mode(action(option="contour"))
    await app.on_generate(action())

    assert service.payloads == [{
        "ulx": 1.0, "uly": 46.0, "lrx": 2.0, "lry": 45.0, "zoom_level": 10, "option": "contour"
    }]
    state = chat.store.get("state")
    assert state["image_path"] == "x.png"
    assert state["status"] == {"kind": "loaded", "image_path": "x.png"}
    assert chat.store.get("presenter").sink.calls == [
        ("show_loading", "contour"),
        ("hide_loading",),
        ("show_image", "x.png"),
    ]


@pytest.mark.asyncio
async def test_generate_failure_keeps_image_and_clears_loading(chat, service):
    service.status_code = 502
    chat.store.get("session").update(image_path="before.png")

    await app.on_viewport_changed(action(**BROWSER_REPORT))
    await app.on_generate(action())

    state = chat.store.get("state")
    assert state["image_path"] == "before.png"
    assert state["status"]["kind"] == "failed"
    assert chat.store.get("presenter").sink.calls == [("show_loading", "hillshade"), ("hide_loading",)]


@pytest.mark.asyncio
async def test_generate_before_map_reports_sends_nothing(chat, service):
    await app.on_generate(action())

    assert service.requests == []
    assert "still loading" in chat.cl.Message.call_args.kwargs["content"]
    assert chat.store.get("state")["status"] == {"kind": "idle"}


@pytest.mark.asyncio
async def test_unknown_render_mode_is_rejected(chat):
    await app.on_select_mode(action(option="slope"))

    assert chat.store.get("session").model.render_mode == "hillshade"
    assert chat.cl.Message.call_args.kwargs["content"] == "An error occurred while processing your request."


@pytest.mark.asyncio
async def test_chat_end_releases_map_and_client(chat, client):
    await app.on_viewport_changed(action(**BROWSER_REPORT))
    await client._get_client()

    await app.end()

    assert not chat.store.get("map_view").ready
    assert client.client is None


@pytest.mark.asyncio
async def test_generate_writes_nothing_to_disk(chat, service, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    await app.on_viewport_changed(action(**BROWSER_REPORT))
    await app.on_generate(action())

    assert service.requests
    assert list(tmp_path.iterdir()) == []
