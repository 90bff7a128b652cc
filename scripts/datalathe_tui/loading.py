"""
Generation-tagged asynchronous loading for DataLathe TUI.

Every screen that fetches remote data owns a LoadCoordinator. Each issued
request is tagged with a generation number; a response only reaches visible
state if its generation is still the newest one. Responses to superseded
requests, or arriving after the owner is gone, are dropped. The transport has
no cancellation primitive, so discarding late results is the cancellation.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Hashable, Optional, TypeVar

_log = logging.getLogger("datalathe.tui.loading")

T = TypeVar("T")

Producer = Callable[[], Awaitable[T]]

_UNSET = object()


class LoadStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class LoadState(Generic[T]):
    """Snapshot of a coordinator's visible state."""
    generation: int = 0
    status: LoadStatus = LoadStatus.PENDING
    value: Optional[T] = None
    error: Optional[str] = None
    key: Any = None

    @property
    def loading(self) -> bool:
        return self.status == LoadStatus.PENDING


def describe_error(exc: BaseException) -> str:
    """Human-readable message for a failed request."""
    message = str(exc).strip()
    return message or exc.__class__.__name__


def threaded(fn: Callable[..., T], *args, **kwargs) -> Producer:
    """Wrap a blocking call as a zero-argument async producer run in a thread."""
    async def producer() -> T:
        return await asyncio.to_thread(fn, *args, **kwargs)
    return producer


class LoadCoordinator(Generic[T]):
    """One logical query: at most one request whose result can become visible.

    Args:
        on_change: Called with the new LoadState after every visible change
        spawn: Schedules the request coroutine. Defaults to
            ``asyncio.ensure_future``; widgets pass ``run_worker`` so the
            request runs as a Textual worker.
        name: Label used in debug logs
    """

    def __init__(
        self,
        on_change: Optional[Callable[[LoadState[T]], None]] = None,
        spawn: Optional[Callable[[Awaitable[None]], Any]] = None,
        name: str = "load",
    ):
        self.name = name
        self._on_change = on_change
        self._spawn = spawn
        self._generation = 0
        self._state: LoadState[T] = LoadState()
        self._producer: Optional[Producer] = None
        self._key: Any = _UNSET
        self._disposed = False
        self._tasks: set[asyncio.Future] = set()

    # --- Read-only view ---

    @property
    def state(self) -> LoadState[T]:
        return self._state

    @property
    def data(self) -> Optional[T]:
        return self._state.value

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def busy(self) -> bool:
        """A request has been issued and has not completed yet."""
        return self._generation > 0 and self._state.loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def key(self) -> Any:
        return None if self._key is _UNSET else self._key

    @property
    def disposed(self) -> bool:
        return self._disposed

    # --- Issuing ---

    def load(self, producer: Producer, key: Hashable = None) -> int:
        """
        Issue a new request, superseding any outstanding one.

        Same-key requests are not coalesced: every call bumps the generation
        and only the newest response is applied.

        Returns:
            The generation of the issued request
        """
        if self._disposed:
            _log.debug(f"[{self.name}] load ignored after dispose")
            return self._generation

        self._generation += 1
        generation = self._generation
        self._producer = producer
        self._key = key
        self._state = LoadState(
            generation=generation,
            status=LoadStatus.PENDING,
            value=self._state.value,
            error=None,
            key=key,
        )
        _log.debug(f"[{self.name}] issue gen={generation} key={key!r}")
        self._notify()
        self._schedule(self._run(generation, producer))
        return generation

    def set_key(self, producer: Producer, key: Hashable = None) -> bool:
        """Issue a request only if ``key`` differs from the current one (or none was issued)."""
        if self._key is not _UNSET and self._key == key:
            return False
        self.load(producer, key)
        return True

    def reload(self) -> int:
        """Re-issue the last request with the same key."""
        if self._producer is None:
            raise RuntimeError(f"[{self.name}] reload() before any load()")
        return self.load(self._producer, self.key)

    def dispose(self) -> None:
        """Owner is going away: every outstanding response will be discarded."""
        self._disposed = True
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    # --- Completion ---

    def apply(self, generation: int, value: Optional[T] = None, error: Optional[str] = None) -> bool:
        """
        Apply a response iff it belongs to the newest request.

        Args:
            generation: Generation the response was issued under
            value: Result on success
            error: Message on failure (takes precedence over ``value``)

        Returns:
            True if visible state changed, False if the response was stale
        """
        if self._disposed or generation != self._generation:
            _log.debug(
                f"[{self.name}] drop stale gen={generation} current={self._generation} "
                f"disposed={self._disposed}"
            )
            return False

        if error is not None:
            self._state = LoadState(
                generation=generation,
                status=LoadStatus.FAILURE,
                value=self._state.value,
                error=error,
                key=self._state.key,
            )
        else:
            self._state = LoadState(
                generation=generation,
                status=LoadStatus.SUCCESS,
                value=value,
                error=None,
                key=self._state.key,
            )
        _log.debug(f"[{self.name}] apply gen={generation} status={self._state.status.value}")
        self._notify()
        return True

    async def _run(self, generation: int, producer: Producer) -> None:
        try:
            value = await producer()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            _log.debug(f"[{self.name}] gen={generation} failed: {e!r}")
            self.apply(generation, error=describe_error(e))
            return
        self.apply(generation, value=value)

    def _schedule(self, coro: Awaitable[None]) -> None:
        if self._spawn is not None:
            self._spawn(coro)
            return
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self._state)
