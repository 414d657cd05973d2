from __future__ import annotations

from cultivate.adapters.signals import BufferedSignalBus, InProcessSignalBus
from cultivate.domain.ports import ParseRequested, SignalBus
from tests.helpers.pipeline import random_id


def test_in_process_bus_delivers_immediately() -> None:
    bus = InProcessSignalBus()
    received: list[ParseRequested] = []
    bus.subscribe(received.append)
    signal = ParseRequested(random_id())

    bus.publish(signal)

    assert received == [signal]


def test_buffered_bus_holds_signals_until_delivered() -> None:
    bus = BufferedSignalBus()
    received: list[ParseRequested] = []
    bus.subscribe(received.append)
    first, second = ParseRequested(random_id()), ParseRequested(random_id())

    bus.publish(first)
    bus.publish(second)

    assert received == []
    bus.deliver(bus.take())
    assert received == [first, second]


def test_take_hands_over_pending_signals_once() -> None:
    bus = BufferedSignalBus()
    signal = ParseRequested(random_id())
    bus.publish(signal)

    taken = bus.take()

    assert taken == [signal]
    assert bus.take() == []


def test_buses_satisfy_the_port() -> None:
    assert isinstance(InProcessSignalBus(), SignalBus)
    assert isinstance(BufferedSignalBus(), SignalBus)
