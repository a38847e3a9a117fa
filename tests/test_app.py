import pytest

from app import ChatApp
from core.driver import StreamSession
from widgets import ChatLog, InputArea, MessageBubble, parse_command

from .conftest import FakeClient


async def wait_idle(app, pilot, rounds=50):
    for _ in range(rounds):
        await pilot.pause()
        if not app.orchestrator.busy and app.event_q.empty():
            await pilot.pause()
            return
    raise AssertionError("app did not settle")


def test_parse_command():
    assert parse_command("/attach ~/cat.png") == ('attach', '~/cat.png')
    assert parse_command(" /NEW ") == ('new', '')
    assert parse_command("hello /attach") is None
    assert parse_command("//not a command") is None


@pytest.mark.asyncio
async def test_message_is_streamed_into_the_log():
    client = FakeClient(["Hi", " there", "!"])
    app = ChatApp(StreamSession(client, "gemini-2.5-flash"))

    async with app.run_test() as pilot:
        app.query_one(InputArea).value = "Hello"
        await pilot.press("enter")
        await wait_idle(app, pilot)

        texts = [t.text for t in app.orchestrator.transcript]
        assert texts == ["Hello", "Hi there!"]
        assert len(app.query(MessageBubble)) == 2
        assert not app.query_one(InputArea).disabled


@pytest.mark.asyncio
async def test_new_chat_clears_the_log():
    client = FakeClient(["ok"])
    app = ChatApp(StreamSession(client, "gemini-2.5-flash"))

    async with app.run_test() as pilot:
        app.query_one(InputArea).value = "Hello"
        await pilot.press("enter")
        await wait_idle(app, pilot)

        app.query_one(InputArea).value = "/new"
        await pilot.press("enter")
        await wait_idle(app, pilot)

        assert len(app.orchestrator.transcript) == 0
        assert app.query_one(ChatLog).bubbles == {}
        assert len(app.query(MessageBubble)) == 0


@pytest.mark.asyncio
async def test_attach_command_queues_files(tmp_path):
    image = tmp_path / "cat.png"
    image.write_bytes(b"\x89PNG")
    client = FakeClient(["a cat"])
    app = ChatApp(StreamSession(client, "gemini-2.5-flash"))

    async with app.run_test() as pilot:
        app.query_one(InputArea).value = f"/attach {image}"
        await pilot.press("enter")
        await pilot.pause()
        assert app.pending_files == [str(image)]

        app.query_one(InputArea).value = "what is this?"
        await pilot.press("enter")
        await wait_idle(app, pilot)

        assert app.pending_files == []
        user_turn = next(iter(app.orchestrator.transcript))
        assert user_turn.attachments[0].mime_type == "image/png"
