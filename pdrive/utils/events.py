"""Progress events raised by the upload use cases."""
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, DefaultDict, List
import inspect
import logging
logger = logging.getLogger(__name__)

NOTICE = "notice"
PART_START = "part_start"
PART_COMPLETE = "part_complete"


@dataclass(frozen=True)
class PartProgress:
    """Progress information for a single part."""
    part_number: int
    total_parts: int
    size: int = 0
    completed_parts: int = 0


class EventEmitter:
    """
    Fan upload events out to display listeners.

    A failing listener is logged and skipped so the upload itself never
    fails because of progress rendering.
    """

    def __init__(self):
        self._listeners: DefaultDict[str, List[Callable]] = defaultdict(list)

    def on(self, event_name: str, callback: Callable) -> None:
        self._listeners[event_name].append(callback)

    async def emit(self, event_name: str, *args) -> None:
        for callback in self._listeners.get(event_name, ()):
            try:
                result = callback(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Listener for %s failed", event_name)
