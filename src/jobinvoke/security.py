"""
Running a callable as a given identity

The contract is the `SecurityHelper` protocol -- the invoker does not care how the identity switch is
realised. `ScopedSecurityHelper` is the in-process implementation: the identity is pushed onto a thread
local stack for exactly the duration of the call, and handed to the callable explicitly as well.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Protocol

from jobinvoke.low.core import ANONYMOUS, Identity

logger = logging.getLogger(__name__)

IdentityScopedCallable = Callable[[Identity], bool]


class SecurityHelper(Protocol):
    def run_as_anonymous(self, runner: IdentityScopedCallable) -> bool:
        """Every authorization check made by `runner` resolves as unauthenticated. Failures propagate"""
        raise NotImplementedError

    def run_as_user(self, user: str, runner: IdentityScopedCallable) -> bool:
        """Every authorization check made by `runner` resolves as `user`. Failures propagate"""
        raise NotImplementedError


_local = threading.local()


def _stack() -> list[Identity]:
    if not hasattr(_local, "identities"):
        _local.identities = []
    return _local.identities


def current_identity() -> Identity:
    """Identity of the innermost scope on this thread, anonymous outside of any scope"""
    stack = _stack()
    return stack[-1] if stack else ANONYMOUS


@contextmanager
def identity_scope(identity: Identity) -> Iterator[Identity]:
    stack = _stack()
    stack.append(identity)
    depth = len(stack)
    try:
        yield identity
    finally:
        if len(stack) != depth or stack[-1] is not identity:
            # someone inside the scope did not clean after itself -- we still restore ours
            logger.warning(f"identity stack corrupted on exit of {identity}, depth {len(stack)} vs {depth}")
        del stack[depth - 1 :]


class ScopedSecurityHelper:
    def run_as_anonymous(self, runner: IdentityScopedCallable) -> bool:
        return self._run(ANONYMOUS, runner)

    def run_as_user(self, user: str, runner: IdentityScopedCallable) -> bool:
        if not user:
            raise ValueError("run_as_user requires a non-empty user")
        return self._run(Identity(user), runner)

    def _run(self, identity: Identity, runner: IdentityScopedCallable) -> bool:
        with identity_scope(identity):
            logger.debug(f"running as {identity}")
            return runner(identity)
