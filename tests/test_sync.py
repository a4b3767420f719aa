import asyncio

import pytest

from cafe.client import LocalStore, OrderSyncEngine
from cafe.core.exceptions import BackendError, TransportError
from cafe.services.notifications import MockNotifier


@pytest.fixture()
def notifier():
    return MockNotifier()


@pytest.fixture()
def engine(fake_api, notifier):
    engine = OrderSyncEngine(fake_api, notifier=notifier, poll_interval=0.01)
    fake_api.engine = engine
    return engine


def test_cold_start_marks_everything_seen(engine, fake_api, make_order):
    fake_api.orders = [make_order("a"), make_order("b")]

    asyncio.run(engine.refresh())

    assert engine.loaded is True
    assert engine.seen_order_ids == {"a", "b"}
    assert engine.new_orders == []


def test_new_orders_stay_new_until_the_next_refresh(engine, fake_api, make_order):
    async def scenario():
        fake_api.orders = [make_order("a"), make_order("b")]
        await engine.refresh()
        fake_api.orders.append(make_order("c"))
        await engine.refresh()
        after_arrival = [order.order_id for order in engine.new_orders]
        await engine.refresh()
        return after_arrival

    after_arrival = asyncio.run(scenario())

    assert after_arrival == ["c"]
    assert engine.new_orders == []
    assert "c" in engine.seen_order_ids


def test_completing_an_order_acknowledges_it(engine, fake_api, make_order):
    async def scenario():
        await engine.refresh()
        fake_api.orders = [make_order("a")]
        await engine.refresh()
        assert engine.is_new(engine.orders[0])
        return await engine.toggle_completion(engine.orders[0], False)

    assert asyncio.run(scenario()) is True
    assert engine.new_orders == []
    assert engine.orders[0].completed is True


def test_double_toggle_restores_original_value(engine, fake_api, make_order):
    fake_api.orders = [make_order("a")]

    async def scenario():
        await engine.refresh()
        await engine.toggle_completion(engine.orders[0], False)
        await engine.toggle_completion(engine.orders[0], True)

    asyncio.run(scenario())

    assert engine.orders[0].completed is False
    assert fake_api.update_calls == [("a", True), ("a", False)]


def test_order_is_pending_while_update_is_in_flight(engine, fake_api, make_order):
    fake_api.orders = [make_order("a")]

    async def scenario():
        await engine.refresh()
        await engine.toggle_completion(engine.orders[0], False)

    asyncio.run(scenario())

    assert fake_api.observed_pending == [{"a"}]
    assert engine.pending_update_order_ids == set()


def test_failed_toggle_rolls_back(engine, fake_api, notifier, make_order):
    fake_api.orders = [make_order("a", item="Cheesecake")]
    fake_api.update_error = TransportError("HTTP error! status: 500", status_code=500)

    async def scenario():
        await engine.refresh()
        return await engine.toggle_completion(engine.orders[0], False)

    assert asyncio.run(scenario()) is False
    assert engine.orders[0].completed is False
    assert engine.pending_update_order_ids == set()
    assert notifier.errors == ["Failed to update order: HTTP error! status: 500"]


def test_toggle_ignored_while_same_order_is_pending(engine, fake_api, make_order):
    fake_api.orders = [make_order("a")]

    async def scenario():
        fake_api.update_gate = asyncio.Event()
        await engine.refresh()
        order = engine.orders[0]
        first = asyncio.create_task(engine.toggle_completion(order, False))
        await asyncio.sleep(0)
        second = await engine.toggle_completion(order, True)
        fake_api.update_gate.set()
        return await first, second

    first, second = asyncio.run(scenario())

    assert (first, second) == (True, False)
    assert fake_api.update_calls == [("a", True)]


def test_refresh_during_toggle_keeps_optimistic_value(engine, fake_api, make_order):
    fake_api.orders = [make_order("a")]

    async def scenario():
        fake_api.update_gate = asyncio.Event()
        await engine.refresh()
        task = asyncio.create_task(engine.toggle_completion(engine.orders[0], False))
        await asyncio.sleep(0)
        await engine.refresh()
        during = engine.orders[0].completed
        fake_api.update_gate.set()
        await task
        await engine.refresh()
        return during

    assert asyncio.run(scenario()) is True
    assert engine.orders[0].completed is True


def test_refresh_failure_keeps_last_list(engine, fake_api, make_order):
    fake_api.orders = [make_order("a")]

    async def scenario():
        await engine.refresh()
        fake_api.get_error = BackendError("Sheet not found")
        with pytest.raises(BackendError):
            await engine.refresh()

    asyncio.run(scenario())

    assert [order.order_id for order in engine.orders] == ["a"]
    assert engine.error == "Sheet not found"


def test_empty_sheet_gives_empty_counts(engine):
    asyncio.run(engine.refresh())

    assert engine.orders == []
    assert engine.pending_orders == []
    assert engine.completed_orders == []
    assert engine.error is None


def test_pending_and_completed_partition(engine, fake_api, make_order):
    fake_api.orders = [make_order("a"), make_order("b", completed=True), make_order("c")]

    asyncio.run(engine.refresh())

    assert [o.order_id for o in engine.pending_orders] == ["a", "c"]
    assert [o.order_id for o in engine.completed_orders] == ["b"]


def test_new_order_cue_once_per_growing_refresh(engine, fake_api, notifier, make_order):
    engine.sound_enabled = True

    async def scenario():
        fake_api.orders = [make_order("a")]
        await engine.refresh()
        fake_api.orders += [make_order("b"), make_order("c")]
        await engine.refresh()
        await engine.refresh()

    asyncio.run(scenario())

    assert notifier.cue_count == 1


def test_sound_is_off_until_enabled(fake_api, notifier, make_order, tmp_path):
    store = LocalStore(path=tmp_path / "client.json")
    engine = OrderSyncEngine(fake_api, notifier=notifier, store=store, poll_interval=1)
    assert engine.sound_enabled is False

    async def scenario():
        await engine.refresh()
        fake_api.orders = [make_order("a")]
        await engine.refresh()

    asyncio.run(scenario())

    assert notifier.cue_count == 0

    engine.sound_enabled = True
    reloaded = OrderSyncEngine(fake_api, store=LocalStore(path=tmp_path / "client.json"), poll_interval=1)
    assert reloaded.sound_enabled is True


def test_closed_engine_discards_fetch(engine, fake_api, make_order):
    async def scenario():
        await engine.refresh()
        await engine.close()
        fake_api.orders = [make_order("a")]
        await engine.refresh()

    asyncio.run(scenario())

    assert engine.orders == []
    with pytest.raises(RuntimeError):
        engine.start()


def test_user_totals(engine, fake_api, make_order):
    fake_api.orders = [
        make_order(user_id="Mika_Cat", price=450),
        make_order(user_id="Ren_Dog", price=300),
        make_order(user_id="Mika_Cat", price=500),
    ]

    asyncio.run(engine.refresh())
    totals = engine.user_totals()

    assert [(t.user_id, t.total) for t in totals] == [("Mika_Cat", 950), ("Ren_Dog", 300)]


def test_overlapping_refreshes_last_completed_wins(engine, fake_api, notifier, make_order):
    engine.sound_enabled = True

    async def scenario():
        fake_api.orders = [make_order("a")]
        await engine.refresh()

        # Timer fetch starts first and sees a, b; it answers last
        fake_api.orders = [make_order("a"), make_order("b")]
        gate = asyncio.Event()
        fake_api.get_gate = gate
        timer = asyncio.create_task(engine.refresh())
        await asyncio.sleep(0)

        fake_api.orders = [make_order("a"), make_order("b"), make_order("c")]
        await engine.refresh()
        after_manual = [order.order_id for order in engine.new_orders]

        gate.set()
        await timer
        return after_manual

    after_manual = asyncio.run(scenario())

    assert after_manual == ["b", "c"]
    assert [order.order_id for order in engine.orders] == ["a", "b"]
    assert engine.seen_order_ids == {"a", "b"}
    assert notifier.cue_count == 1


def test_close_during_failing_toggle_changes_nothing(engine, fake_api, notifier, make_order):
    fake_api.orders = [make_order("a")]

    async def scenario():
        fake_api.update_gate = asyncio.Event()
        await engine.refresh()
        task = asyncio.create_task(engine.toggle_completion(engine.orders[0], False))
        await asyncio.sleep(0)
        await engine.close()
        at_close = engine.orders
        fake_api.update_error = TransportError("HTTP error! status: 500", status_code=500)
        fake_api.update_gate.set()
        return at_close, await task

    at_close, accepted = asyncio.run(scenario())

    assert accepted is False
    assert engine.orders == at_close
    assert engine.orders[0].completed is True
    assert notifier.notices == []


def test_close_during_successful_toggle_changes_nothing(engine, fake_api, notifier, make_order):
    async def scenario():
        fake_api.orders = [make_order("a")]
        await engine.refresh()
        fake_api.orders.append(make_order("b"))
        await engine.refresh()

        fake_api.update_gate = asyncio.Event()
        task = asyncio.create_task(engine.toggle_completion(engine.orders[1], False))
        await asyncio.sleep(0)
        await engine.close()
        fake_api.update_gate.set()
        return await task

    assert asyncio.run(scenario()) is True
    assert "b" not in engine.seen_order_ids
    assert notifier.notices == []
