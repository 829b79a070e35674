import os
import logging
import uuid
from typing import List

import chainlit as cl
from chainlit.input_widget import Switch

from terrain_viewer.client import ImageServiceClient
from terrain_viewer.config import APP_CONFIG, RENDER_MODES, UserSettings
from terrain_viewer.dispatcher import RequestDispatcher
from terrain_viewer.models import ViewerState
from terrain_viewer.presenter import ResultPresenter
from terrain_viewer.session_manager import SessionManager
from terrain_viewer.viewport import MapNotReadyError, MapView, capture_viewport

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)
logger.setLevel(log_level)

AUTHOR = "Terrain Image Generator"


class ChainlitDisplay:
    """Display sink that draws into the chat."""

    def __init__(self):
        self._spinner = None

    async def show_loading(self, option: str) -> None:
        self._spinner = cl.Message(content=f"Generating {option} image...", author=AUTHOR)
        await self._spinner.send()

    async def hide_loading(self) -> None:
        if self._spinner is not None:
            await self._spinner.remove()
            self._spinner = None

    async def show_image(self, src: str) -> None:
        await cl.Message(
            content="",
            elements=[
                cl.Image(name="terrain", display="inline", size="large", url=src)
            ],
            author=AUTHOR
        ).send()


def render_mode_actions(selected: str) -> List[cl.Action]:
    """Radio-style buttons for the render mode plus the Generate trigger."""
    actions = [
        cl.Action(
            name="select_mode",
            payload={"option": option},
            label=f"{'●' if option == selected else '○'} {option.capitalize()}"
        )
        for option in RENDER_MODES
    ]
    actions.append(cl.Action(name="generate", payload={}, label="Generate"))
    return actions


@cl.on_chat_start
async def on_chat_start():
    try:
        cl.user_session.set("session_id", str(uuid.uuid4()))

        settings = UserSettings()
        session = SessionManager(ViewerState, cl.user_session)
        session.update(render_mode=settings.default_render_mode)

        map_view = MapView(APP_CONFIG.map)
        client = ImageServiceClient(
            endpoint=APP_CONFIG.image_service.endpoint,
            timeout=APP_CONFIG.image_service.timeout
        )

        cl.user_session.set("settings", settings)
        cl.user_session.set("session", session)
        cl.user_session.set("map_view", map_view)
        cl.user_session.set("image_client", client)
        cl.user_session.set("presenter", ResultPresenter(ChainlitDisplay()))

        await cl.ChatSettings([
            Switch(id="debug_mode", label="Show error details", initial=settings.debug_mode)
        ]).send()

        await cl.Message(
            content="Move the map to the area you want, pick a render mode and press Generate.",
            elements=[
                cl.CustomElement(name="TerrainMap", props=map_view.element_props(), display="inline")
            ],
            actions=render_mode_actions(session.model.render_mode),
            author=AUTHOR
        ).send()

    except Exception as e:
        logger.error(f"Error during chat initialization: {e}")
        await handle_error(e, "chat initialization")


@cl.action_callback("viewport_changed")
async def on_viewport_changed(action: cl.Action):
    try:
        map_view: MapView = cl.user_session.get("map_view")
        map_view.update_from_payload(action.payload)
    except Exception as e:
        await handle_error(e, "viewport update")


@cl.action_callback("select_mode")
async def on_select_mode(action: cl.Action):
    try:
        option = action.payload["option"]
        if option not in RENDER_MODES:
            raise ValueError(f"Unknown render mode: {option}")

        session: SessionManager[ViewerState] = cl.user_session.get("session")
        session.update(render_mode=option)
        logger.info(f"Render mode set to {option}")

        await cl.Message(
            content=f"Render mode: **{option.capitalize()}**",
            actions=render_mode_actions(option),
            author=AUTHOR
        ).send()
    except Exception as e:
        await handle_error(e, "render mode selection")


@cl.action_callback("generate")
async def on_generate(action: cl.Action):
    try:
        session: SessionManager[ViewerState] = cl.user_session.get("session")
        map_view: MapView = cl.user_session.get("map_view")
        presenter: ResultPresenter = cl.user_session.get("presenter")

        try:
            request = capture_viewport(map_view, session.model.render_mode)
        except MapNotReadyError as e:
            logger.warning(f"Generate clicked before the map was ready: {e}")
            await cl.Message(content="The map is still loading, try again in a moment.", author=AUTHOR).send()
            return

        logger.info(f"Sending bounding box: {request.to_payload()}")

        async def on_change(state: ViewerState) -> None:
            session.sync()
            await presenter.present(state)

        dispatcher = RequestDispatcher(cl.user_session.get("image_client"), on_change=on_change)
        with session.batch_update() as state:
            await dispatcher.dispatch(request, state)
    except Exception as e:
        await handle_error(e, "image generation")


@cl.on_chat_end
async def end():
    try:
        map_view = cl.user_session.get("map_view")
        if map_view is not None:
            map_view.release()
        client = cl.user_session.get("image_client")
        if client is not None:
            await client.close()
    except Exception as e:
        logger.error(f"Error during cleanup: {str(e)}")


@cl.on_settings_update
async def setup_settings(settings: dict):
    """Update user settings with validation."""
    try:
        current = cl.user_session.get("settings", UserSettings())

        if "debug_mode" in settings:
            current.debug_mode = bool(settings["debug_mode"])

        cl.user_session.set("settings", current)

        await cl.Message(
            content="Settings updated successfully",
            author="System"
        ).send()
    except Exception as e:
        await handle_error(e, "settings update")


async def handle_error(error: Exception, context: str):
    """Handle errors consistently."""
    error_msg = f"Error during {context}: {str(error)}"
    logger.error(error_msg, exc_info=True)

    user_msg = "An error occurred while processing your request."
    settings = cl.user_session.get("settings", UserSettings())
    if settings and settings.debug_mode:
        user_msg = f"{user_msg}\n\nDebug info: {str(error)}"

    await cl.Message(
        content=user_msg,
        author="System"
    ).send()
