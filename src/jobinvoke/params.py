"""
Parameter handling prior to invocation: locale defaulting, stripping of the invocation plumbing
and resolution of the stream provider the action is supposed to read from / write into
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, BinaryIO, Optional, Protocol, runtime_checkable

from typing_extensions import Self

from jobinvoke.low.core import (
    CONTROL_PARAMS,
    INVOKER_STREAMPROVIDER,
    INVOKER_STREAMPROVIDER_INPUT_FILE,
    INVOKER_STREAMPROVIDER_OUTPUT_FILE_PATTERN,
    INVOKER_STREAMPROVIDER_UNIQUE_FILE_NAME,
    USER_LOCALE_PARAM,
    Params,
)

logger = logging.getLogger(__name__)


## Sanitizer


def ensure_locale(params: Params, default_locale: str) -> Params:
    """Injects the default locale unless the caller supplied a non-blank one. Mutates in place"""
    current = params.get(USER_LOCALE_PARAM)
    if current is None or not str(current).strip():
        params[USER_LOCALE_PARAM] = default_locale
    return params


def strip_control_params(params: Params) -> Params:
    """Removes the invocation plumbing so that the action never observes it. Mutates in place,
    idempotent"""
    for key in CONTROL_PARAMS:
        params.pop(key, None)
    return params


def sanitize(params: Params, default_locale: str) -> Params:
    return strip_control_params(ensure_locale(params, default_locale))


## Stream providers


@runtime_checkable
class StreamProvider(Protocol):
    def open_input(self) -> Optional[BinaryIO]:
        raise NotImplementedError

    def open_output(self) -> BinaryIO:
        raise NotImplementedError


def _open_unique(path: str) -> tuple[str, BinaryIO]:
    """Creates a file at `path`, or at `path (n)` if taken. Never overwrites, also when racing"""
    root, ext = os.path.splitext(path)
    candidate = path
    i = 0
    while True:
        try:
            return candidate, open(candidate, "xb")
        except FileExistsError:
            i += 1
            candidate = f"{root} ({i}){ext}"


@dataclass
class FileStreamProvider:
    input_path: Optional[str]
    output_pattern: str
    auto_create_unique_filename: bool = True
    # the path actually written to, known only after `open_output`
    output_path: Optional[str] = None

    def open_input(self) -> Optional[BinaryIO]:
        if not self.input_path:
            return None
        return open(self.input_path, "rb")

    def open_output(self) -> BinaryIO:
        if self.auto_create_unique_filename:
            path, handle = _open_unique(self.output_pattern)
        else:
            path, handle = self.output_pattern, open(self.output_pattern, "wb")
        self.output_path = path
        logger.debug(f"opened output {path} for pattern {self.output_pattern}")
        return handle

    @property
    def output_relocated(self) -> bool:
        """Whether the output ended up elsewhere than the pattern said, ie, the job definition is stale"""
        return self.output_path is not None and self.output_path != self.output_pattern

    @classmethod
    def from_params(cls, params: Params) -> Optional[Self]:
        input_path = params.get(INVOKER_STREAMPROVIDER_INPUT_FILE)
        output_pattern = params.get(INVOKER_STREAMPROVIDER_OUTPUT_FILE_PATTERN)
        if not input_path or not str(input_path).strip():
            return None
        if not output_pattern or not str(output_pattern).strip():
            return None
        unique = params.get(INVOKER_STREAMPROVIDER_UNIQUE_FILE_NAME)
        return cls(
            input_path=str(input_path),
            output_pattern=str(output_pattern),
            auto_create_unique_filename=unique is None or str(unique).lower() == "true",
        )


def resolve_stream_provider(params: Optional[Params]) -> Optional[StreamProvider]:
    """Reads the stream provider marker, does not mutate params. Absence is a normal outcome"""
    if params is None:
        return None
    value: Any = params.get(INVOKER_STREAMPROVIDER)
    if isinstance(value, StreamProvider):
        return value
    if value is not None:
        # NOTE a string marker is never deserialized, only live provider instances are accepted
        logger.warning(f"stream provider of unexpected {type(value)}, ignoring")
    return FileStreamProvider.from_params(params)
