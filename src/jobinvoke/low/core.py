"""
Core data structures of an invocation -- prescribes most of the API
"""

# NOTE we could have gone with pydantic here, but the action is an arbitrary object/callable
# and the status carries a live exception, neither of which survives validation or serde.
# We are sticking to plain dataclasses, like executor messages do

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol, runtime_checkable

## Reserved parameter keys -- exact spelling preserved for compatibility with persisted jobs

INVOKER_ACTIONCLASS = "ActionAdapterQuartzJob-ActionClass"
INVOKER_ACTIONID = "ActionAdapterQuartzJob-ActionId"
INVOKER_ACTIONUSER = "ActionAdapterQuartzJob-ActionUser"
INVOKER_STREAMPROVIDER = "ActionAdapterQuartzJob-StreamProvider"
INVOKER_STREAMPROVIDER_INPUT_FILE = "ActionAdapterQuartzJob-StreamProvider-InputFile"
INVOKER_STREAMPROVIDER_OUTPUT_FILE_PATTERN = "ActionAdapterQuartzJob-StreamProvider-OutputFilePattern"
INVOKER_STREAMPROVIDER_UNIQUE_FILE_NAME = "autoCreateUniqueFilename"
INVOKER_UIPASSPARAM = "uiPassParam"
WORK_ITEM_UID = "workItemUid"
USER_LOCALE_PARAM = "user_locale"

# removed in this order, after the stream provider has been read
CONTROL_PARAMS = (
    INVOKER_ACTIONCLASS,
    INVOKER_ACTIONID,
    INVOKER_ACTIONUSER,
    INVOKER_STREAMPROVIDER,
    INVOKER_UIPASSPARAM,
)

# acting user denoting a session created by the system rather than by a person
SYSTEM_SESSION_USER = "system session"

Params = dict[str, Any]


class InvocationError(Exception):
    """The action could not be invoked at all -- raised, never captured into InvokeStatus"""


@runtime_checkable
class Action(Protocol):
    """A unit of work with explicit context. Plain callables are accepted as well, and are
    called with the sanitized params as kwargs"""

    def execute(self, context: "ActionContext") -> Optional[bool]:
        raise NotImplementedError


ActionLike = Action | Callable[..., Any]


@dataclass
class ActionDetails:
    action: Optional[ActionLike]
    # owned by this invocation for its duration, sanitized in place
    parameters: Optional[Params]
    user_name: Optional[str] = None

    @property
    def work_item_uid(self) -> Optional[str]:
        return extract_uid(self)


@dataclass
class InvokeStatus:
    throwable: Optional[BaseException] = None
    requires_update: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.throwable is not None


@dataclass(frozen=True)
class ActionContext:
    """What the unit of work gets to see -- the identity is passed explicitly rather than
    being looked up from ambient state"""

    identity: "Identity"
    params: Params
    stream_provider: Any = None  # StreamProvider | None, kept loose to avoid import cycle
    work_item_uid: Optional[str] = None


@dataclass(frozen=True)
class Identity:
    name: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return self.name is None

    def __str__(self) -> str:
        return self.name if self.name is not None else "<anonymous>"


ANONYMOUS = Identity()


def _non_blank(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def extract_uid(action_details: Optional[ActionDetails]) -> Optional[str]:
    """Work item uid of the invocation. Deterministic: the explicit uid if the caller supplied one,
    otherwise derived from the action id and class markers, so that repeated triggers of the same
    job end up in the same lifecycle stream"""
    if action_details is None or action_details.parameters is None:
        return None
    params = action_details.parameters
    if (explicit := _non_blank(params.get(WORK_ITEM_UID))) is not None:
        return explicit
    parts = [p for p in (_non_blank(params.get(INVOKER_ACTIONID)), _non_blank(params.get(INVOKER_ACTIONCLASS))) if p]
    if not parts:
        return None
    return "-".join(["WI", *parts])
