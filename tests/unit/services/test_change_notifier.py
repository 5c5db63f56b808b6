"""
Unit tests for ChangeNotifier
"""

import pytest

from app.models.change_event import ContestSettled, PickChanged, ScoresUpdated
from app.services.change_notifier import ChangeNotifier


@pytest.mark.asyncio
async def test_handlers_get_their_event_type():
    notifier = ChangeNotifier()
    seen = []

    async def on_pick(event):
        seen.append(("pick", event.game_id))

    async def on_scores(event):
        seen.append(("scores", event.game_id))

    notifier.on(PickChanged, on_pick)
    notifier.on(ScoresUpdated, on_scores)

    await notifier.publish(PickChanged(user_id="u", game_id=1, outcome="created", team_id=2))
    await notifier.publish(ScoresUpdated(game_id=2, user_ids=["u"]))
    await notifier.publish(ContestSettled(game_id=3))

    assert seen == [("pick", 1), ("scores", 2)]


@pytest.mark.asyncio
async def test_handler_errors_propagate():
    notifier = ChangeNotifier()

    async def broken(event):
        raise RuntimeError("handler failed")

    notifier.on(ContestSettled, broken)

    with pytest.raises(RuntimeError):
        await notifier.publish(ContestSettled(game_id=1))


@pytest.mark.asyncio
async def test_clear_handlers():
    notifier = ChangeNotifier()
    seen = []

    async def handler(event):
        seen.append(event)

    notifier.on(ContestSettled, handler)
    notifier.clear_handlers()
    await notifier.publish(ContestSettled(game_id=1))

    assert seen == []


@pytest.mark.asyncio
async def test_subscribers_receive_every_event():
    notifier = ChangeNotifier()

    async with notifier.subscribe() as first, notifier.subscribe() as second:
        assert notifier.subscriber_count == 2

        await notifier.publish(ContestSettled(game_id=7))

        assert (await first.get()).game_id == 7
        assert (await second.get()).game_id == 7

    assert notifier.subscriber_count == 0


@pytest.mark.asyncio
async def test_events_serialize_for_the_wire():
    event = ScoresUpdated(game_id=7, user_ids=["a", "b"])

    payload = event.model_dump(mode="json")

    assert payload["type"] == "scores_updated"
    assert payload["user_ids"] == ["a", "b"]
    assert isinstance(payload["emitted_at"], str)


@pytest.mark.asyncio
async def test_stalled_subscriber_drops_events(caplog):
    notifier = ChangeNotifier(max_queue_size=2)

    async with notifier.subscribe() as stalled:
        for game_id in range(5):
            await notifier.publish(ContestSettled(game_id=game_id))

        assert stalled.qsize() == 2
        assert [(await stalled.get()).game_id for _ in range(2)] == [0, 1]

        # once it reads again, new events get through
        await notifier.publish(ContestSettled(game_id=9))
        assert (await stalled.get()).game_id == 9

    assert "dropping" in caplog.text
