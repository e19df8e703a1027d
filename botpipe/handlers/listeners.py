"""
Listener hooks around routing.

- Pre-listeners gate an event: the first one returning False aborts the
  dispatch, routing and post-listeners included
- Post-listeners observe every event that reached the router

Listeners may be plain functions or coroutine functions.
"""

import inspect
from typing import Any, Awaitable, Callable, Union

from loguru import logger as default_logger

from botpipe.errors import BotAlreadyRunning
from botpipe.pipe.pipe import Pipe

PreListener = Callable[[Pipe], Union[bool, Awaitable[bool]]]
PostListener = Callable[[Pipe], Union[None, Awaitable[None]]]


def _listener_name(fn: Callable) -> str:
    return getattr(fn, "__qualname__", None) or repr(fn)


async def _call(fn: Callable, pipe: Pipe) -> Any:
    result = fn(pipe)
    if inspect.isawaitable(result):
        result = await result
    return result


class ListenerChain:
    """Ordered, append-only pre- and post-listeners."""

    def __init__(
        self,
        pre: tuple[PreListener, ...] = (),
        post: tuple[PostListener, ...] = (),
        logger: Any = None,
    ):
        self._pre: list[PreListener] = list(pre)
        self._post: list[PostListener] = list(post)
        self._frozen = False
        self.logger = logger or default_logger

    @property
    def pre_listeners(self) -> tuple[PreListener, ...]:
        return tuple(self._pre)

    @property
    def post_listeners(self) -> tuple[PostListener, ...]:
        return tuple(self._post)

    def _check_open(self) -> None:
        if self._frozen:
            raise BotAlreadyRunning("Cannot add listeners after dispatch has started")

    def add_pre_listener(self, *fns: PreListener) -> None:
        self._check_open()
        self._pre.extend(fns)

    def add_post_listener(self, *fns: PostListener) -> None:
        self._check_open()
        self._post.extend(fns)

    def snapshot(self, logger: Any = None) -> "ListenerChain":
        """Frozen copy of this chain for use during dispatch."""
        chain = ListenerChain(
            tuple(self._pre),
            tuple(self._post),
            logger=logger or self.logger,
        )
        chain._frozen = True
        return chain

    async def run_pre(self, pipe: Pipe) -> bool:
        """
        Run pre-listeners in order.

        Returns:
            False as soon as one listener returns a falsy value or raises,
            True otherwise.
        """
        for fn in self._pre:
            try:
                cont = await _call(fn, pipe)
            except Exception as e:
                self.logger.error(f"Pre-listener {_listener_name(fn)} failed - {e}")
                return False

            if not cont:
                self.logger.trace(f"Dispatch aborted by {_listener_name(fn)}")
                return False

        return True

    async def run_post(self, pipe: Pipe) -> None:
        """Run every post-listener in order; one failing does not stop the rest."""
        for fn in self._post:
            try:
                await _call(fn, pipe)
            except Exception as e:
                self.logger.error(f"Post-listener {_listener_name(fn)} failed - {e}")
