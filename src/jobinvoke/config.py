"""
Process-wide configuration -- read-only from the invoker's perspective, injected rather than looked up
"""

import locale
import os

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Self

from jobinvoke.low.core import SYSTEM_SESSION_USER

logging_config = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s %(process)d %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "jobinvoke": {"level": "INFO", "handlers": ["console"], "propagate": False},
    },
    "root": {"level": "WARNING", "handlers": ["console"]},
}


def _system_locale() -> str:
    # NOTE getlocale may give (None, None) in minimal containers
    lang, _ = locale.getlocale()
    return lang or "en_US"


class InvokerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    default_locale: str = Field(
        default_factory=_system_locale,
        description="injected as user_locale into params of actions that come without one",
    )
    system_session_user: str = Field(
        SYSTEM_SESSION_USER,
        description="acting user which is treated as no user at all, ie, the action runs anonymously",
    )

    @classmethod
    def from_env(cls) -> Self:
        overrides = {}
        if (v := os.environ.get("JOBINVOKE_DEFAULT_LOCALE")):
            overrides["default_locale"] = v
        if (v := os.environ.get("JOBINVOKE_SYSTEM_SESSION_USER")):
            overrides["system_session_user"] = v
        return cls(**overrides)
