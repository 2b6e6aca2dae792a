import pytest
from interactions import Permissions

from relay import ChannelStateStore, CompletionClient, ActionExecutor, CommandHandler, MessageRouter
from tests.fakes import FakeChannel, FakeClient, FakeMember, FakeSession

ADMIN_PERMISSIONS = Permissions.MANAGE_CHANNELS | Permissions.MANAGE_GUILD


@pytest.fixture
def store() -> ChannelStateStore:
    return ChannelStateStore()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def completion(store, session) -> CompletionClient:
    return CompletionClient(store, "test-token", api_url="https://llm.example/invoke", session=session)


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel(id=555)


@pytest.fixture
def other_channel() -> FakeChannel:
    return FakeChannel(id=777)


@pytest.fixture
def client(channel, other_channel) -> FakeClient:
    return FakeClient(channels=[channel, other_channel])


@pytest.fixture
def executor(client) -> ActionExecutor:
    return ActionExecutor(client)


@pytest.fixture
def commands(store) -> CommandHandler:
    return CommandHandler(store)


@pytest.fixture
def router(store, completion, executor, commands) -> MessageRouter:
    return MessageRouter(store, completion, executor, commands, serialize_channels=True)


@pytest.fixture
def admin() -> FakeMember:
    return FakeMember(id=1, permissions=ADMIN_PERMISSIONS)


@pytest.fixture
def member() -> FakeMember:
    return FakeMember(id=42)
