from typing import Optional

import pytest

from jobinvoke.config import InvokerConfig
from jobinvoke.invoker import ActionInvoker
from jobinvoke.lifecycle import WorkItemLifecycleEvent, WorkItemLifecyclePublisher
from jobinvoke.security import IdentityScopedCallable, ScopedSecurityHelper


class RecordingSecurityHelper(ScopedSecurityHelper):
    """Remembers in which mode it was asked to run, and then runs for real"""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Optional[str]]] = []

    def run_as_anonymous(self, runner: IdentityScopedCallable) -> bool:
        self.calls.append(("anonymous", None))
        return super().run_as_anonymous(runner)

    def run_as_user(self, user: str, runner: IdentityScopedCallable) -> bool:
        self.calls.append(("user", user))
        return super().run_as_user(user, runner)


@pytest.fixture(scope="function")
def publisher():
    return WorkItemLifecyclePublisher()


@pytest.fixture(scope="function")
def events(publisher) -> list[WorkItemLifecycleEvent]:
    received: list[WorkItemLifecycleEvent] = []
    publisher.subscribe(received.append)
    return received


@pytest.fixture(scope="function")
def security():
    return RecordingSecurityHelper()


@pytest.fixture(scope="function")
def invoker(publisher, security):
    config = InvokerConfig(default_locale="de_DE")
    return ActionInvoker(config=config, security=security, publisher=publisher)
