"""
Thin wrapper over a single action -- the callable handed over to the SecurityHelper

Just context building, action invocation and tracing. Failure handling is deliberately absent: whatever
the action raises propagates to the invoker, which decides how to record it.
"""

import inspect
import logging
from time import perf_counter_ns
from typing import Any, Callable, Optional

from jobinvoke.low.core import Action, ActionContext, ActionLike, Identity, Params
from jobinvoke.params import FileStreamProvider, StreamProvider

logger = logging.getLogger(__name__)


def accepted_kwargs(func: Callable, params: Params) -> dict[str, Any]:
    """Subset of params which func can take as kwargs -- all of them if it has **kwargs"""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # builtins etc without introspectable signature
        return dict(params)
    accepted: set[str] = set()
    for name, parameter in signature.parameters.items():
        if parameter.kind == inspect.Parameter.VAR_KEYWORD:
            return dict(params)
        if parameter.kind in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY):
            accepted.add(name)
    dropped = params.keys() - accepted
    if dropped:
        logger.debug(f"not passing {sorted(dropped)} to {getattr(func, '__name__', func)}")
    return {k: v for k, v in params.items() if k in accepted}


class ActionRunner:
    def __init__(
        self,
        action: ActionLike,
        params: Params,
        stream_provider: Optional[StreamProvider] = None,
        work_item_uid: Optional[str] = None,
    ) -> None:
        self.action = action
        self.params = params
        self.stream_provider = stream_provider
        self.work_item_uid = work_item_uid

    def __call__(self, identity: Identity) -> bool:
        start = perf_counter_ns()
        context = ActionContext(
            identity=identity,
            params=self.params,
            stream_provider=self.stream_provider,
            work_item_uid=self.work_item_uid,
        )

        if isinstance(self.action, Action):
            result = self.action.execute(context)
        elif callable(self.action):
            result = self.action(**accepted_kwargs(self.action, self.params))
        else:
            raise TypeError(f"action of type {type(self.action)} is neither an Action nor a callable")

        requires_update = result is True
        if isinstance(self.stream_provider, FileStreamProvider) and self.stream_provider.output_relocated:
            logger.debug(f"output relocated to {self.stream_provider.output_path}, requiring update")
            requires_update = True

        end = perf_counter_ns()
        logger.debug(f"elapsed {(end-start)/1e9: .5f} s in {self.work_item_uid} as {identity}")
        return requires_update
