"""
Invokes an action locally, as the acting user of the ActionDetails

Two tiers of failures:
 - precondition failures (no details, no action, no params) are published as FAILED and raised as
   InvocationError, the action is never attempted
 - execution failures of any kind are published as FAILED and captured into the returned InvokeStatus,
   the caller then decides about retries
"""

import logging
from typing import Optional

from jobinvoke.config import InvokerConfig
from jobinvoke.lifecycle import WorkItemLifecyclePhase, WorkItemLifecyclePublisher, default_publisher
from jobinvoke.low.core import ActionDetails, InvocationError, InvokeStatus, extract_uid
from jobinvoke.params import ensure_locale, resolve_stream_provider, strip_control_params
from jobinvoke.runner import ActionRunner
from jobinvoke.security import ScopedSecurityHelper, SecurityHelper

logger = logging.getLogger(__name__)

CANT_INVOKE_NULL_ACTION = "Cannot invoke a null action, or an action without parameters"


class ActionInvoker:
    def __init__(
        self,
        config: Optional[InvokerConfig] = None,
        security: Optional[SecurityHelper] = None,
        publisher: Optional[WorkItemLifecyclePublisher] = None,
    ) -> None:
        self.config = config or InvokerConfig()
        self.security: SecurityHelper = security or ScopedSecurityHelper()
        self.publisher = publisher or default_publisher

    def runs_anonymously(self, user: Optional[str]) -> bool:
        # NOTE a job created by the system session is deliberately not run as authenticated
        return not user or user == self.config.system_session_user

    def invoke(self, action_details: Optional[ActionDetails]) -> InvokeStatus:
        work_item_uid = extract_uid(action_details)

        if action_details is None or action_details.action is None or action_details.parameters is None:
            params = action_details.parameters if action_details is not None else None
            self.publisher.publish(work_item_uid, params, WorkItemLifecyclePhase.FAILED, CANT_INVOKE_NULL_ACTION)
            raise InvocationError(CANT_INVOKE_NULL_ACTION)

        params = action_details.parameters
        self.publisher.publish(work_item_uid, params, WorkItemLifecyclePhase.IN_PROGRESS)

        action = action_details.action
        logger.debug(f"running {type(action).__name__} locally with {params=}")

        ensure_locale(params, self.config.default_locale)
        # the provider must be read before its marker gets stripped
        stream_provider = resolve_stream_provider(params)
        strip_control_params(params)

        user = action_details.user_name
        runner = ActionRunner(action, params, stream_provider, work_item_uid)
        status = InvokeStatus(details={"work_item_uid": work_item_uid})

        requires_update = False
        try:
            if self.runs_anonymously(user):
                status.details["run_as"] = None
                requires_update = self.security.run_as_anonymous(runner)
            else:
                status.details["run_as"] = user
                requires_update = self.security.run_as_user(user, runner)  # type: ignore[arg-type]
        except BaseException as e:
            logger.exception(f"action failure in {work_item_uid}, capturing into status")
            self.publisher.publish(work_item_uid, params, WorkItemLifecyclePhase.FAILED, repr(e))
            status.throwable = e
        else:
            # published only once the identity scope has been released
            self.publisher.publish(work_item_uid, params, WorkItemLifecyclePhase.SUCCEEDED)
        status.requires_update = bool(requires_update)

        return status
