"""Synchronous named notifications with explicit subscription handles."""

from collections.abc import Callable
from typing import Any

Handler = Callable[..., Any]


class Subscription:
    """Handle returned by ``EventEmitter.on``.

    Releasing is idempotent. Handles also work as context managers so a
    listener can be scoped to a ``with`` block.
    """

    def __init__(self, release: Callable[[], None]) -> None:
        self._release: Callable[[], None] | None = release

    @property
    def active(self) -> bool:
        return self._release is not None

    def release(self) -> None:
        if self._release is not None:
            release, self._release = self._release, None
            release()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class EventEmitter:
    """Dispatch named events to handlers in registration order.

    Dispatch works on a snapshot of the handler list, so handlers added or
    released while an event is being fired only take effect for the next one.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def on(self, name: str, handler: Handler) -> Subscription:
        handlers = self._handlers.setdefault(name, [])
        # Wrap so that registering the same callable twice yields two
        # independently releasable entries.
        entry: Handler = lambda *args: handler(*args)
        handlers.append(entry)

        def release() -> None:
            current = self._handlers.get(name)
            if current is not None and entry in current:
                current.remove(entry)

        return Subscription(release)

    def fire(self, name: str, *args: Any) -> None:
        for handler in tuple(self._handlers.get(name, ())):
            handler(*args)

    def listener_count(self, name: str) -> int:
        return len(self._handlers.get(name, ()))

    def clear(self) -> None:
        self._handlers.clear()
