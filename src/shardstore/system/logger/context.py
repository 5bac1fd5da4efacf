# Copyright (C) 2024 Josua Krause
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Provides context for logging or error reporting."""
import contextlib
import threading
from collections.abc import Iterator
from typing import TypedDict

from typing_extensions import NotRequired

from shardstore.system.base import BlobId


TH_LOCAL = threading.local()
"""The thread local holding the current context."""


ContextInfo = TypedDict('ContextInfo', {
    "store": NotRequired[str | None],
    "blob": NotRequired[BlobId | None],
})
"""Context of the current operation. "store" is the root folder of the store
and "blob" the blob that is being accessed."""


ContextJSON = TypedDict('ContextJSON', {
    "store": NotRequired[str | None],
    "blob": NotRequired[str | None],
})
"""Context of the current operation as a JSONable object."""


def to_ctx_json(info: ContextInfo) -> ContextJSON:
    """
    Convert a context into a JSONable object.

    Args:
        info (ContextInfo): The context.

    Returns:
        ContextJSON: A JSONable object.
    """
    blob_id = info.get("blob")
    return {
        "store": info.get("store"),
        "blob": None if blob_id is None else blob_id.to_parseable(),
    }


NAME_CTX = "ctx"
"""Name of the standard context."""
NAME_PREEXC_CTX = "preexc_ctx"
"""Name of the pre-exception context."""


def _get_context() -> ContextInfo:
    res: ContextInfo | None = getattr(TH_LOCAL, NAME_CTX, None)
    if res is None:
        res = {}
        setattr(TH_LOCAL, NAME_CTX, res)
    return res


def _set_context(ctx: ContextInfo) -> None:
    setattr(TH_LOCAL, NAME_CTX, ctx)


def _get_preexc_context() -> ContextInfo:
    res: ContextInfo | None = getattr(TH_LOCAL, NAME_PREEXC_CTX, None)
    if res is None:
        res = {}
        setattr(TH_LOCAL, NAME_PREEXC_CTX, res)
    return res


def _set_preexc_context(ctx: ContextInfo) -> None:
    setattr(TH_LOCAL, NAME_PREEXC_CTX, ctx)


@contextlib.contextmanager
def add_context(add_info: ContextInfo) -> Iterator[None]:
    """
    Provides a resource block with additional context information. If the
    block raises, the context stays available as pre-exception context so
    error events can still report where the error happened.

    Args:
        add_info (ContextInfo): The additional context information.
    """
    old_ctx = _get_context()
    new_ctx = old_ctx.copy()
    new_ctx.update(add_info)
    success = False
    try:
        _set_context(new_ctx)
        _set_preexc_context(new_ctx)
        yield
        success = True
    finally:
        _set_context(old_ctx)
        if success:
            _set_preexc_context(old_ctx)


def get_ctx() -> ContextInfo:
    """
    Retrieves the current context.

    Returns:
        ContextInfo: The context.
    """
    return _get_context().copy()


def get_preexc_ctx() -> ContextInfo:
    """
    Retrieves the context from before the exception was raised. If no exception
    was raised then the context is the same as the current context.

    Returns:
        ContextInfo: The pre-exception context.
    """
    return _get_preexc_context().copy()


def ctx_format(ctx: ContextInfo) -> str:
    """
    Formats a context.

    Args:
        ctx (ContextInfo): The context.

    Returns:
        str: The context as string.
    """
    store = ctx.get("store")
    blob_id = ctx.get("blob")
    store_str = "[unknown]" if store is None else store
    blob_str = "" if blob_id is None else f" {blob_id}"
    return f"{store_str}{blob_str}"
