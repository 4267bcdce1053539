"""
Entrypoint for invoking a single action locally

Example:
```
python -m jobinvoke mymod.submod.function --user alice --x 1 --y foo
```

All params not consumed by the entrypoint itself are passed to the action. The process exits with 1
if the invocation failed.
"""

import logging
import logging.config
import sys
from typing import Any, Optional

import fire

from jobinvoke.config import InvokerConfig, logging_config
from jobinvoke.invoker import ActionInvoker
from jobinvoke.low.core import INVOKER_ACTIONCLASS, INVOKER_ACTIONID, INVOKER_ACTIONUSER, ActionDetails, InvokeStatus
from jobinvoke.low.func import resolve_callable

logger = logging.getLogger("jobinvoke.cli")


def invoke(entrypoint: str, user: Optional[str] = None, action_id: Optional[str] = None, **params: Any) -> InvokeStatus:
    action = resolve_callable(entrypoint)
    if isinstance(action, type):
        # a class implementing the Action protocol, instantiate it
        action = action()
    parameters: dict[str, Any] = {
        INVOKER_ACTIONCLASS: entrypoint,
        INVOKER_ACTIONID: action_id or entrypoint,
        INVOKER_ACTIONUSER: user or "",
        **params,
    }
    invoker = ActionInvoker(config=InvokerConfig.from_env())
    return invoker.invoke(ActionDetails(action=action, parameters=parameters, user_name=user))


def main(entrypoint: str, user: Optional[str] = None, action_id: Optional[str] = None, **params: Any) -> int:
    logging.config.dictConfig(logging_config)
    status = invoke(entrypoint, user, action_id, **params)
    if status.failed:
        logger.error(f"invocation of {entrypoint} failed: {status.throwable!r}")
        return 1
    logger.info(f"invocation of {entrypoint} succeeded, requires_update={status.requires_update}")
    return 0


if __name__ == "__main__":
    sys.exit(fire.Fire(main))
