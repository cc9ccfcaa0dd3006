"""Tests for planning and dispatching messages to interested modules."""

import logging

import pytest
from ingestion.dispatcher import Dispatcher


def _dispatcher(calls):
    dispatcher = Dispatcher()
    dispatcher.subscribe("stats", calls.append, types=["edit"], properties=["diff_size", "page_size"])
    dispatcher.subscribe("newbies", calls.append, types=["edit", "log"], properties=["user_info", "diff_size"])
    dispatcher.subscribe("uploads", calls.append, types=["log"])
    return dispatcher


class TestPlan:
    def test_union_of_properties_in_subscription_order(self, edit):
        properties, interested = _dispatcher([]).plan(edit)
        assert properties == ["diff_size", "page_size", "user_info"]
        assert interested == ["stats", "newbies"]

    def test_filters_by_type(self, parser):
        message = parser.create("log line", "log", user="X")
        properties, interested = _dispatcher([]).plan(message)
        assert properties == ["user_info", "diff_size"]
        assert interested == ["newbies", "uploads"]

    def test_unsubscribe(self, edit):
        dispatcher = _dispatcher([])
        dispatcher.unsubscribe("stats")
        dispatcher.unsubscribe("never-subscribed")
        assert dispatcher.plan(edit)[1] == ["newbies"]


class TestDispatch:
    @pytest.mark.asyncio
    async def test_calls_interested_handlers(self, edit):
        calls = []
        edit.fetch(None, [], ["stats", "newbies"])
        edit._resolve()

        notified = await _dispatcher(calls).dispatch(edit)

        assert notified == ["stats", "newbies"]
        assert calls == [edit, edit]

    @pytest.mark.asyncio
    async def test_awaits_async_handlers(self, edit):
        seen = []

        async def handler(message):
            seen.append(message.type)

        dispatcher = Dispatcher()
        dispatcher.subscribe("async", handler, types=["edit"])
        edit.fetch(None, [], ["async"])

        assert await dispatcher.dispatch(edit) == ["async"]
        assert seen == ["edit"]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self, edit, caplog):
        calls = []

        def broken(message):
            raise RuntimeError("boom")

        dispatcher = _dispatcher(calls)
        dispatcher.subscribe("broken", broken, types=["edit"])
        edit.fetch(None, [], ["broken", "stats"])

        with caplog.at_level(logging.ERROR):
            notified = await dispatcher.dispatch(edit)

        assert notified == ["stats"]
        assert "boom" in caplog.text

    @pytest.mark.asyncio
    async def test_unsubscribed_module_is_skipped(self, edit, caplog):
        edit.fetch(None, [], ["gone"])
        with caplog.at_level(logging.WARNING):
            assert await Dispatcher().dispatch(edit) == []
        assert "not subscribed" in caplog.text

    @pytest.mark.asyncio
    async def test_nothing_to_do_before_fetch(self, edit):
        assert await _dispatcher([]).dispatch(edit) == []
