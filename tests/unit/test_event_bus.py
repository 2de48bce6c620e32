import pytest
from hlspack.infrastructure.event_bus import EventBus
from hlspack.domain.events import Event, JobProgressUpdated

class MockEvent(Event):
    message: str

def test_event_bus_subscribe_publish():
    bus = EventBus()
    received_events = []

    def callback(event: MockEvent):
        received_events.append(event)

    bus.subscribe(MockEvent, callback)

    event = MockEvent(message="hello")
    bus.publish(event)

    assert len(received_events) == 1
    assert received_events[0].message == "hello"

def test_event_bus_multiple_subscribers():
    bus = EventBus()
    results = {"a": False, "b": False}

    bus.subscribe(MockEvent, lambda e: results.update({"a": True}))
    bus.subscribe(MockEvent, lambda e: results.update({"b": True}))

    bus.publish(MockEvent(message="test"))

    assert results["a"] is True
    assert results["b"] is True

def test_event_bus_decorator_subscribe():
    bus = EventBus()
    received = []

    @bus.subscribe(MockEvent)
    def on_event(event: MockEvent):
        received.append(event)

    bus.publish(MockEvent(message="decorator"))
    assert len(received) == 1
    assert received[0].message == "decorator"

def test_event_bus_ignores_unsubscribed_types():
    bus = EventBus()
    received = []
    bus.subscribe(MockEvent, received.append)

    bus.publish(JobProgressUpdated(job_id="job-1", progress=10.0))

    assert received == []

def test_progress_event_is_not_clamped():
    event = JobProgressUpdated(job_id="job-1", progress=104.2)
    assert event.progress == pytest.approx(104.2)

def test_event_bus_unsubscribe():
    bus = EventBus()
    received = []
    bus.subscribe(MockEvent, received.append)

    assert bus.unsubscribe(MockEvent, received.append) is True
    assert bus.unsubscribe(MockEvent, received.append) is False
    bus.publish(MockEvent(message="gone"))

    assert received == []

def test_event_bus_handler_may_unsubscribe_during_publish():
    bus = EventBus()
    calls = []

    def once(event):
        calls.append("once")
        bus.unsubscribe(MockEvent, once)

    bus.subscribe(MockEvent, once)
    bus.subscribe(MockEvent, lambda e: calls.append("always"))

    bus.publish(MockEvent(message="1"))
    bus.publish(MockEvent(message="2"))

    assert calls == ["once", "always", "always"]

def test_event_bus_handler_error_reaches_publisher():
    bus = EventBus()

    def broken(event):
        raise RuntimeError("handler failed")

    bus.subscribe(MockEvent, broken)
    with pytest.raises(RuntimeError, match="handler failed"):
        bus.publish(MockEvent(message="x"))
