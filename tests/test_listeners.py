"""
Tests for the listener chain.

Tests:
- Pre-listener gating and short-circuit
- Post-listener ordering and error isolation
- Sync and async listeners
"""

import pytest
from unittest.mock import MagicMock

from botpipe.errors import BotAlreadyRunning
from botpipe.handlers.listeners import ListenerChain
from botpipe.pipe.pipe import Pipe


@pytest.fixture
def chain():
    return ListenerChain(logger=MagicMock())


@pytest.fixture
def pipe(make_message, transport):
    return Pipe(make_message("/start"), transport)


class TestPreListeners:
    """Tests for run_pre."""

    @pytest.mark.asyncio
    async def test_no_listeners_continue(self, chain, pipe):
        assert await chain.run_pre(pipe) is True

    @pytest.mark.asyncio
    async def test_all_true_continue(self, chain, pipe):
        order = []
        chain.add_pre_listener(
            lambda p: order.append("a") or True,
            lambda p: order.append("b") or True,
        )

        assert await chain.run_pre(pipe) is True
        assert order == ["a", "b"]

    @pytest.mark.asyncio
    async def test_first_false_short_circuits(self, chain, pipe):
        later = MagicMock(return_value=True)
        chain.add_pre_listener(lambda p: True, lambda p: False, later)

        assert await chain.run_pre(pipe) is False
        later.assert_not_called()

    @pytest.mark.asyncio
    async def test_async_listener(self, chain, pipe):
        async def only_commands(p):
            return bool(p.command)

        chain.add_pre_listener(only_commands)

        assert await chain.run_pre(pipe) is True

    @pytest.mark.asyncio
    async def test_raising_listener_aborts(self, chain, pipe):
        def broken(p):
            raise RuntimeError("nope")

        chain.add_pre_listener(broken)

        assert await chain.run_pre(pipe) is False
        chain.logger.error.assert_called_once()


class TestPostListeners:
    """Tests for run_post."""

    @pytest.mark.asyncio
    async def test_run_in_order(self, chain, pipe):
        order = []

        async def second(p):
            order.append("second")

        chain.add_post_listener(lambda p: order.append("first"))
        chain.add_post_listener(second)

        await chain.run_post(pipe)

        assert order == ["first", "second"]

    @pytest.mark.asyncio
    async def test_error_does_not_stop_others(self, chain, pipe):
        seen = []

        def broken(p):
            raise ValueError("bad")

        chain.add_post_listener(broken, lambda p: seen.append(p))

        await chain.run_post(pipe)

        assert seen == [pipe]


def test_snapshot_is_frozen(chain):
    chain.add_pre_listener(lambda p: True)
    frozen = chain.snapshot()

    with pytest.raises(BotAlreadyRunning):
        frozen.add_post_listener(lambda p: None)
    assert len(frozen.pre_listeners) == 1
    assert frozen.post_listeners == ()
