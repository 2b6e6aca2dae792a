"""Tests for the message router end to end against fakes."""

import asyncio
import json
from unittest.mock import AsyncMock

from relay import MessageRouter
from tests.fakes import FakeMember, FakeMessage, FakeResponse


class TestEligibility:

    async def test_bot_authors_ignored(self, router, store, session, channel):
        store.set_active(channel.id, True)
        message = FakeMessage("hello", author=FakeMember(id=9, bot=True), channel=channel)

        await router.on_message(message)

        assert session.requests == []
        assert message.replies == []

    async def test_inactive_channel_makes_no_call(self, router, session, member, channel):
        await router.on_message(FakeMessage("hello", author=member, channel=channel))
        assert session.requests == []

    async def test_inactive_channel_ignores_blacklist_status(self, router, store, session, member, channel):
        store.blacklist(member.id)
        await router.on_message(FakeMessage("hello", author=member, channel=channel))
        store.whitelist(member.id)
        await router.on_message(FakeMessage("hello", author=member, channel=channel))
        assert session.requests == []

    async def test_blacklisted_user_makes_no_call(self, router, store, session, member, channel):
        store.set_active(channel.id, True)
        store.blacklist(member.id)

        message = FakeMessage("hello", author=member, channel=channel)
        await router.on_message(message)

        assert session.requests == []
        assert message.replies == []
        assert store.get_or_create(channel.id).history == []

    async def test_empty_content_ignored(self, router, store, session, member, channel):
        store.set_active(channel.id, True)
        await router.on_message(FakeMessage("   ", author=member, channel=channel))
        assert session.requests == []

    async def test_commands_never_reach_completion(self, router, store, session, admin, channel):
        store.set_active(channel.id, True)
        await router.on_message(FakeMessage("ai~whatever", author=admin, channel=channel))
        await router.on_message(FakeMessage("ai~stop", author=admin, channel=channel))
        assert session.requests == []
        assert not store.is_active(channel.id)


class TestRelay:

    async def test_scenario_hello(self, router, store, session, admin, member, channel):
        await router.on_message(FakeMessage("ai~start", author=admin, channel=channel))
        session.queue(200, {"content": "hi there"})

        message = FakeMessage("  hello  ", author=member, channel=channel)
        await router.on_message(message)

        assert message.replies == ["hi there"]
        assert store.history_payload(channel.id) == [
            {"role": "user", "content": "hello"},
            {"role": "assistant", "content": '{"content":"hi there"}'},
        ]

    async def test_empty_content_not_sent(self, router, store, session, member, channel):
        store.set_active(channel.id, True)
        session.queue(200, {"content": ""})
        message = FakeMessage("hello", author=member, channel=channel)
        await router.on_message(message)
        assert message.replies == []

    async def test_actions_handed_to_executor(self, router, store, session, member, channel):
        store.set_active(channel.id, True)
        session.queue(200, {"response": json.dumps({
            "content": "on it",
            "actions": [
                {"type": "react", "label": "cat", "target": "🐱", "auto_execute": True},
                {"type": "reply", "label": "needs approval", "target": "x", "auto_execute": False},
            ],
        })})

        message = FakeMessage("react please", author=member, channel=channel)
        await router.on_message(message)

        assert message.replies == ["on it"]
        assert message.reactions == ["🐱"]

    async def test_executor_not_called_without_actions(self, store, completion, session, commands, member, channel):
        executor = AsyncMock()
        router = MessageRouter(store, completion, executor, commands)
        store.set_active(channel.id, True)
        session.queue(200, {"content": "plain", "actions": []})

        await router.on_message(FakeMessage("hello", author=member, channel=channel))

        executor.execute.assert_not_called()


class TestFailures:

    async def test_remote_error_replies_once(self, router, store, session, member, channel):
        store.set_active(channel.id, True)
        session.queue(429, "slow down")

        message = FakeMessage("hello", author=member, channel=channel)
        await router.on_message(message)

        assert message.replies == ["Error: API 429: slow down"]
        assert store.history_payload(channel.id) == [{"role": "user", "content": "hello"}]

    async def test_router_keeps_serving_after_failure(self, router, store, session, member, channel):
        store.set_active(channel.id, True)
        session.queue(500, "boom")
        session.queue(200, {"content": "recovered"})

        first = FakeMessage("one", author=member, channel=channel)
        second = FakeMessage("two", author=member, channel=channel)
        await router.on_message(first)
        await router.on_message(second)

        assert first.replies == ["Error: API 500: boom"]
        assert second.replies == ["recovered"]
        # Failed user turn stays; no rollback
        assert [t["content"] for t in store.history_payload(channel.id)][:2] == ["one", "two"]

    async def test_error_reply_failure_is_swallowed(self, router, store, session, member, channel):
        store.set_active(channel.id, True)
        session.queue(500, "boom")
        message = FakeMessage("hello", author=member, channel=channel,
                              failures={"reply": RuntimeError("Missing Access")})

        await router.on_message(message)

        assert message.replies == []


class GatedSession:
    """Holds every response until the test releases it; records prompts in arrival order."""

    def __init__(self):
        self.prompts = []
        self.gate = asyncio.Event()

    def post(self, url, headers=None, json=None):
        self.prompts.append(json["prompt"])
        return _GatedResponse(self.gate, len(self.prompts))


class _GatedResponse(FakeResponse):
    def __init__(self, gate, n):
        super().__init__(200, '{"content": "r%d"}' % n)
        self.gate = gate

    async def __aenter__(self):
        await self.gate.wait()
        return self


class TestConcurrency:

    async def _two_messages(self, store, commands, executor, member, channel, serialize):
        from relay import CompletionClient

        session = GatedSession()
        completion = CompletionClient(store, "t", session=session)
        router = MessageRouter(store, completion, executor, commands, serialize_channels=serialize)
        store.set_active(channel.id, True)

        first = asyncio.create_task(router.on_message(FakeMessage("a", author=member, channel=channel)))
        second = asyncio.create_task(router.on_message(FakeMessage("b", author=member, channel=channel)))
        await asyncio.sleep(0.01)
        session.gate.set()
        await asyncio.gather(first, second)
        return [json.loads(p) for p in session.prompts]

    async def test_serialized_channel_sees_previous_answer(self, store, commands, executor, member, channel):
        prompts = await self._two_messages(store, commands, executor, member, channel, serialize=True)

        assert [t["content"] for t in prompts[0]] == ["a"]
        assert [t["role"] for t in prompts[1]] == ["user", "assistant", "user"]

    async def test_unserialized_channel_interleaves(self, store, commands, executor, member, channel):
        prompts = await self._two_messages(store, commands, executor, member, channel, serialize=False)

        assert [t["content"] for t in prompts[1]] == ["a", "b"]
