"""
Publishing of work item lifecycle events -- fire and forget

Every event is logged at debug level (assuming to be parsed later, like tracing marks are), and then
delivered synchronously to all subscribed listeners. Publishing never raises: losing an observability
event must not abort the invocation it reports on.
"""

import logging
import socket
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class WorkItemLifecyclePhase(str, Enum):
    SCHEDULED = "SCHEDULED"
    SUBMITTED = "SUBMITTED"
    DISPATCHED = "DISPATCHED"
    RECEIVED = "RECEIVED"
    REJECTED = "REJECTED"
    IN_PROGRESS = "IN_PROGRESS"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    RESTARTED = "RESTARTED"

    @property
    def is_terminal(self) -> bool:
        return self in (WorkItemLifecyclePhase.SUCCEEDED, WorkItemLifecyclePhase.FAILED, WorkItemLifecyclePhase.REJECTED)


class WorkItemLifecycleEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    work_item_uid: Optional[str]
    details: str = Field(description="stringified snapshot of the params at the time of publishing")
    phase: WorkItemLifecyclePhase
    message: Optional[str] = None
    source_host: str = Field(default_factory=socket.gethostname)
    source_timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


Listener = Callable[[WorkItemLifecycleEvent], Any]


def _details(params: Optional[Mapping[str, Any]]) -> str:
    if params is None:
        return ""
    # NOTE snapshot, params keep being mutated by the invocation after publishing
    return ";".join(f"{k}={v}" for k, v in params.items())


class WorkItemLifecyclePublisher:
    """Thread safe -- listeners may be (un)subscribed while other threads publish"""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def publish(
        self,
        work_item_uid: Optional[str],
        params: Optional[Mapping[str, Any]],
        phase: WorkItemLifecyclePhase,
        message: Optional[str] = None,
    ) -> None:
        try:
            event = WorkItemLifecycleEvent(
                work_item_uid=work_item_uid,
                details=_details(params),
                phase=phase,
                message=message,
            )
            logger.debug(f"work_item={work_item_uid};phase={phase.value};message={message}")
            with self._lock:
                listeners = list(self._listeners)
        except Exception:
            logger.exception(f"failed to build lifecycle event {phase} for {work_item_uid}")
            return

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"listener {listener!r} failed on lifecycle event {phase} for {work_item_uid}")


default_publisher = WorkItemLifecyclePublisher()


def publish(
    work_item_uid: Optional[str],
    params: Optional[Mapping[str, Any]],
    phase: WorkItemLifecyclePhase,
    message: Optional[str] = None,
) -> None:
    default_publisher.publish(work_item_uid, params, phase, message)
