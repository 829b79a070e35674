import logging
from dataclasses import dataclass
from typing import Optional
from typing_extensions import Protocol

from terrain_viewer.models import Loaded, ViewerState

logger = logging.getLogger(__name__)


class DisplaySink(Protocol):
    """Where the presenter draws. The Chainlit app provides one."""

    async def show_loading(self, option: str) -> None: ...

    async def hide_loading(self) -> None: ...

    async def show_image(self, src: str) -> None: ...


@dataclass(frozen=True)
class PresenterView:
    show_spinner: bool
    image_src: Optional[str]

    @classmethod
    def from_state(cls, state: ViewerState) -> "PresenterView":
        return cls(
            show_spinner=state.loading,
            image_src=state.image_path or None
        )


class ResultPresenter:
    """Mirrors the viewer state onto a display sink."""

    def __init__(self, sink: DisplaySink):
        self.sink = sink
        self.spinner_visible = False
        self.last_kind: Optional[str] = None

    async def present(self, state: ViewerState) -> PresenterView:
        view = PresenterView.from_state(state)

        if view.show_spinner and not self.spinner_visible:
            await self.sink.show_loading(state.status.option)
            self.spinner_visible = True
        elif not view.show_spinner and self.spinner_visible:
            await self.sink.hide_loading()
            self.spinner_visible = False

        # Each new Loaded draws its image, even when the service reuses a path
        if isinstance(state.status, Loaded) and self.last_kind != "loaded" and view.image_src:
            await self.sink.show_image(view.image_src)
            logger.debug(f"Displayed image {view.image_src}")
        self.last_kind = state.status.kind

        return view
