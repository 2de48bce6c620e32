from typing import Any, Callable, Dict, List, Optional, Type

from hlspack.domain.events import Event

Handler = Callable[[Any], None]


class EventBus:
    """Synchronous pub/sub between the orchestrator and whatever displays its progress.

    Handlers run on the publishing thread, in subscription order. A handler that
    raises propagates into the publisher, which is how an encode learns its host
    is gone.
    """

    def __init__(self):
        self._handlers: Dict[Type[Event], List[Handler]] = {}

    def subscribe(self, event_type: Type[Event], callback: Optional[Handler] = None):
        """Registers callback for exactly event_type; without callback, returns a decorator."""
        if callback is None:
            def decorator(func: Handler):
                self.subscribe(event_type, func)
                return func
            return decorator

        self._handlers.setdefault(event_type, []).append(callback)
        return callback

    def unsubscribe(self, event_type: Type[Event], callback: Handler) -> bool:
        handlers = self._handlers.get(event_type, [])
        if callback in handlers:
            handlers.remove(callback)
            return True
        return False

    def publish(self, event: Event) -> None:
        # Snapshot so a handler may unsubscribe while being dispatched.
        for callback in list(self._handlers.get(type(event), ())):
            callback(event)
