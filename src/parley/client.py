"""
AsyncChatClient: the chat session facade.

All session state lives behind one asyncio work queue. Inbound server events
and user actions are both queued and run one at a time on the
event-processing task, in arrival order.
"""

import asyncio
import contextlib
import functools
import logging
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import BaseModel

from parley.auth import login_data
from parley.channels import ChannelDirectory
from parley.config import SETTINGS_FILE, HostSettings, load_config
from parley.dispatcher import EventDispatcher, SessionContext
from parley.errors import PreconditionError
from parley.handlers import build_dispatcher
from parley.models.channel import NOTES_CHANNEL_TITLE
from parley.models.events import C2SEvent
from parley.models.identity import PublicIdentity
from parley.models.message import Message, MessagesRequest, OutboundMessage
from parley.presentation import (
    Effect,
    Emit,
    Notify,
    Presenter,
    PromptCredentials,
    PromptKind,
    RefreshChannels,
    RefreshMessages,
    UpdateProfile,
)
from parley.state import SessionSnapshot
from parley.supervisor import ConnectionSupervisor
from parley.transport.socketio import SocketIOManager

logger = logging.getLogger(__name__)

NOT_CONNECTED = "You are not connected to the server."
NOT_LOGGED_IN = "You are not logged in."

Work = Callable[[], Optional[list[Effect]]]


class AsyncChatClient:
    """Async chat client (primary)."""

    def __init__(
        self,
        presenter: Presenter,
        settings_path: Path = SETTINGS_FILE,
        transport: Optional[SocketIOManager] = None,
        dispatcher: Optional[EventDispatcher] = None,
        **supervisor_options: Any,
    ):
        self._presenter = presenter
        self._settings_path = settings_path
        self._transport = transport or SocketIOManager()
        self.dispatcher = dispatcher or build_dispatcher()
        self.context = SessionContext()
        self.supervisor = ConnectionSupervisor(
            self._transport,
            settings=self.load_settings,
            notify=self._presenter.notify,
            on_connected=self._bind_events,
            **supervisor_options,
        )
        self._queue: asyncio.Queue[Work] = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None
        self._prompts: set[asyncio.Task] = set()

    @property
    def connected(self) -> bool:
        return self.supervisor.connected and self._transport.connected

    @property
    def session(self) -> SessionSnapshot:
        return self.context.state.snapshot()

    @property
    def directory(self) -> ChannelDirectory:
        return self.context.directory

    @property
    def displayed_messages(self) -> tuple[Message, ...]:
        return self.context.messages.items

    def load_settings(self) -> HostSettings:
        return load_config(self._settings_path)

    # -- lifecycle ------------------------------------------------------

    async def start(self) -> bool:
        """Start processing and dial the configured server."""
        self._ensure_worker()
        settings = self.load_settings()
        return await self.supervisor.connect(settings.host, settings.port)

    async def reconnect(self) -> bool:
        settings = self.load_settings()
        return await self.supervisor.connect(settings.host, settings.port)

    async def close(self) -> None:
        await self.supervisor.close()
        for task in list(self._prompts):
            task.cancel()
        worker, self._worker = self._worker, None
        if worker is not None:
            worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await worker

    def submit(self, work: Work) -> None:
        """Queue `work` for the event-processing task."""
        self._ensure_worker()
        self._queue.put_nowait(work)

    async def drain(self) -> None:
        """Wait until every queued work item has run."""
        await self._queue.join()

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self._process())

    async def _process(self) -> None:
        while True:
            work = await self._queue.get()
            try:
                self._apply(work() or [])
            except PreconditionError as e:
                self._presenter.notify(str(e))
            except Exception:
                logger.exception("Work item failed")
            finally:
                self._queue.task_done()

    # -- inbound --------------------------------------------------------

    def _bind_events(self) -> None:
        self.dispatcher.bind(self._transport, self._on_event)
        self._transport.on_disconnect(lambda: self.submit(self._logged_out_by_disconnect))

    def _on_event(self, event: str, raw: Any) -> None:
        self.submit(functools.partial(self.dispatcher.dispatch, self.context, event, raw))

    def _logged_out_by_disconnect(self) -> list[Effect]:
        self.context.state.log_out()
        return []

    # -- effects --------------------------------------------------------

    def _apply(self, effects: list[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, Emit):
                self._emit(effect.event, effect.payload)
            elif isinstance(effect, RefreshMessages):
                self._presenter.refresh_displayed_messages(
                    self.context.messages.items, scroll_to_top=effect.scroll_to_top)
            elif isinstance(effect, RefreshChannels):
                self._presenter.refresh_channel_selector(self.directory.titles(), effect.selected)
            elif isinstance(effect, UpdateProfile):
                self._presenter.update_profile(effect.text)
            elif isinstance(effect, Notify):
                self._presenter.notify(effect.description)
            elif isinstance(effect, PromptCredentials):
                self._spawn_prompt(effect.kind, effect.title)

    def _emit(self, event: str, payload: Any) -> None:
        if not self.connected:
            raise PreconditionError(NOT_CONNECTED)
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(mode="json", by_alias=True)
        self._transport.emit(event, payload)

    def _spawn_prompt(self, kind: PromptKind, title: str) -> None:
        task = asyncio.get_running_loop().create_task(self._prompt(kind, title))
        self._prompts.add(task)
        task.add_done_callback(self._prompts.discard)

    async def _prompt(self, kind: PromptKind, title: str) -> None:
        credentials = await self._presenter.prompt_credentials(title)
        if credentials is None:
            return
        username, password = credentials
        if kind is PromptKind.REGISTER:
            self.register(username, password)
        else:
            self.login(username, password)

    # -- user actions ---------------------------------------------------

    async def request_login(self, title: str = "Login") -> None:
        """Prompt for credentials and log in. Does nothing if the prompt is cancelled."""
        if not self.connected:
            self._presenter.notify(NOT_CONNECTED)
            return
        await self._prompt(PromptKind.LOGIN, title)

    async def request_registration(self, title: str = "Register") -> None:
        if not self.connected:
            self._presenter.notify(NOT_CONNECTED)
            return
        await self._prompt(PromptKind.REGISTER, title)

    def login(self, username: str, password: str) -> None:
        self.submit(functools.partial(self._send_credentials, C2SEvent.LOGIN, username, password))

    def register(self, username: str, password: str) -> None:
        self.submit(functools.partial(self._send_credentials, C2SEvent.REGISTER, username, password))

    def send_message(self, text: str) -> None:
        self.submit(functools.partial(self._send_message, text))

    def open_channel(self, channel_id: int) -> None:
        self.submit(functools.partial(self._open, channel_id))

    def select_channel(self, title: str) -> None:
        """Open the channel shown under `title` in the selector."""
        self.submit(lambda: self._open(self.directory.resolve_id(title)))

    def open_notes(self) -> None:
        self.submit(self._open_notes)

    def open_channel_by_user(self, identity: PublicIdentity) -> None:
        """Open the private channel with `identity`, creating it on first contact."""
        self.submit(functools.partial(self._open_by_user, identity))

    def _send_credentials(self, event: str, username: str, password: str) -> list[Effect]:
        if not self.connected:
            raise PreconditionError(NOT_CONNECTED)
        return [Emit(event, login_data(username, password))]

    def _send_message(self, text: str) -> list[Effect]:
        if not text:
            return []
        state = self.context.state
        if not state.logged_in or state.current_user is None:
            raise PreconditionError(NOT_LOGGED_IN)
        if not self.connected:
            raise PreconditionError(NOT_CONNECTED)
        return [Emit(C2SEvent.MESSAGE, OutboundMessage(
            author=state.current_user.public(),
            chat_id=state.current_channel_id,
            text=text,
        ))]

    def _open(self, channel_id: int) -> list[Effect]:
        state = self.context.state
        state.switch_channel(channel_id)
        if not self.connected or not state.logged_in or state.current_user is None:
            return []
        logger.debug("Load messages from chat %d", channel_id)
        return [Emit(C2SEvent.GET_MESSAGES, MessagesRequest(
            chat_id=channel_id, requesting_user=state.current_user))]

    def _open_notes(self) -> list[Effect]:
        viewer_id = self.context.state.viewer_id
        if viewer_id is None:
            return []
        return [RefreshChannels(selected=NOTES_CHANNEL_TITLE), *self._open(viewer_id)]

    def _open_by_user(self, identity: PublicIdentity) -> list[Effect]:
        if identity.id == self.context.state.viewer_id:
            return self._open_notes()
        self.directory.ensure_channel(identity)
        return [RefreshChannels(selected=self.directory.title_of(identity.id)), *self._open(identity.id)]
