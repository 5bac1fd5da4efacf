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
"""Event types for the logging system."""
import datetime
from typing import Literal, TypedDict

from typing_extensions import NotRequired

from shardstore.system.base import BlobId
from shardstore.system.error import ErrorCode
from shardstore.system.logger.context import ContextInfo


ErrorEvent = TypedDict('ErrorEvent', {
    "name": Literal["error"],
    "message": str,
    "traceback": list[str],
    "code": ErrorCode,
})
"""An event to report errors."""


WarningEvent = TypedDict('WarningEvent', {
    "name": Literal["warning"],
    "message": str,
})
"""A event to report warnings."""


StoreEvent = TypedDict('StoreEvent', {
    "name": Literal["store"],
    "action": Literal["open"],
    "root": str,
    "levels": int,
    "hash_name": str,
    "chunk_size": int,
    "upper_hex": bool,
})
"""Event to indicate that a store has been opened."""


BlobEvent = TypedDict('BlobEvent', {
    "name": Literal["blob"],
    "action": Literal["write", "read", "transfer", "remove"],
    "blob": BlobId,
    "size": NotRequired[int],
})
"""Event to indicate that a blob has been accessed. "size" is the number of
bytes moved, if known."""


ShardEvent = TypedDict('ShardEvent', {
    "name": Literal["shard"],
    "blob": BlobId,
    "path": str,
})
"""Debug event reporting where a blob is located."""


AnyEvent = (
    ErrorEvent
    | WarningEvent
    | StoreEvent
    | BlobEvent
    | ShardEvent
)
"""An event that can be logged to the event stream."""


EventInfo = TypedDict('EventInfo', {
    "when": datetime.datetime,
    "name": str,
    "ctx": ContextInfo,
    "event": AnyEvent,
})
"""Full information and context for events that can be logged to the event
stream."""
