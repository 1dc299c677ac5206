"""View-side collaborators of the presenters.

EntityView is what a presenter talks to. RequestView is the implementation
used by HTTP routers: it lives for one request, collects notifications and
owns the confirmation dialog of that request.
"""

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from src.bk_common.errors import OperationFailedError, RequiredFieldsMissingError
from src.bk_crud.messages import Message, http_status_for


T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)

Listener = Callable[[], Awaitable[None] | None]


async def call_listener(listener: Callable[..., Any], *args: Any) -> None:
    """Invoke a sync or async callback."""
    result = listener(*args)
    if inspect.isawaitable(result):
        await result


class Registration:
    """Handle returned by a listener registration; remove() detaches it."""

    def __init__(self, remove: Callable[[], None]) -> None:
        self._remove: Callable[[], None] | None = remove

    def remove(self) -> None:
        if self._remove is not None:
            self._remove()
            self._remove = None


class ConfirmDialog:
    def __init__(self) -> None:
        self.header = ""
        self.text = ""
        self.confirm_text = ""
        self.cancel_text = ""
        self.opened = False
        self._confirm_listeners: list[Listener] = []
        self._cancel_listeners: list[Listener] = []

    def open(self, message: Message) -> None:
        self.header = message.caption
        self.text = message.message
        self.confirm_text = message.ok_text
        self.cancel_text = message.cancel_text
        self.opened = True

    def add_confirm_listener(self, listener: Listener) -> Registration:
        return self._register(self._confirm_listeners, listener)

    def add_cancel_listener(self, listener: Listener) -> Registration:
        return self._register(self._cancel_listeners, listener)

    async def confirm(self) -> None:
        self.opened = False
        for listener in list(self._confirm_listeners):
            await call_listener(listener)

    async def cancel(self) -> None:
        self.opened = False
        for listener in list(self._cancel_listeners):
            await call_listener(listener)

    @property
    def listener_count(self) -> int:
        return len(self._confirm_listeners) + len(self._cancel_listeners)

    def as_dict(self) -> dict[str, str]:
        return {
            "header": self.header,
            "text": self.text,
            "confirm_text": self.confirm_text,
            "cancel_text": self.cancel_text,
        }

    @staticmethod
    def _register(listeners: list[Listener], listener: Listener) -> Registration:
        listeners.append(listener)

        def _remove() -> None:
            if listener in listeners:
                listeners.remove(listener)

        return Registration(_remove)


class EntityView(Protocol[T_contra]):
    confirm_dialog: ConfirmDialog

    def show_error(self, message: str, persistent: bool) -> None: ...

    def write(self, entity: T_contra) -> None: ...

    def is_dirty(self) -> bool: ...

    def clear(self) -> None: ...


class EntityForm(Protocol[T_contra]):
    def write_to(self, entity: T_contra) -> None: ...


@dataclass(frozen=True)
class Notification:
    message: str
    persistent: bool


class RequestView(Generic[T]):
    def __init__(self, form: EntityForm[T] | None = None) -> None:
        self.confirm_dialog = ConfirmDialog()
        self.notifications: list[Notification] = []
        self._form = form

    def show_error(self, message: str, persistent: bool) -> None:
        self.notifications.append(Notification(message, persistent))

    def write(self, entity: T) -> None:
        if self._form is None:
            raise RequiredFieldsMissingError("No form data submitted")
        self._form.write_to(entity)

    def is_dirty(self) -> bool:
        return self._form is not None

    def clear(self) -> None:
        self._form = None

    @property
    def failed(self) -> bool:
        return bool(self.notifications)

    def raise_if_failed(self) -> None:
        """Turn the last reported failure into an OperationFailedError."""
        if not self.notifications:
            return
        last = self.notifications[-1]
        raise OperationFailedError(last.message, last.persistent, http_status_for(last.message))
