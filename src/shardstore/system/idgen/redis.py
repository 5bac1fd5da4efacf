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
"""Generates ids from a counter in redis. All processes using the same redis
share the counter and thus never create the same id."""
from typing import Literal

from redipy import Redis, RedisConfig

from shardstore.system.base import BlobId, is_safe_name
from shardstore.system.error import StoreConfigError
from shardstore.system.idgen.idgen import IdGenerator


class RedisIdGenerator(IdGenerator):
    """Generates ids from an atomic counter. Names consist of the prefix and
    the counter value as 16 hex digits."""
    def __init__(
            self,
            cfg: RedisConfig | None,
            *,
            prefix: str = "",
            backend: Literal["redis", "memory"] = "redis") -> None:
        if prefix and not is_safe_name(prefix):
            raise StoreConfigError(f"invalid id prefix: {prefix!r}")
        if backend == "memory":
            self._redis = Redis("memory")
        elif cfg is None:
            raise StoreConfigError("redis id generator requires a config")
        else:
            self._redis = Redis("redis", cfg=cfg, redis_module="idgen")
        self._prefix = prefix

    def key_counter(self) -> str:
        """
        The redis key of the counter.

        Returns:
            str: The key.
        """
        return f"counter:{self._prefix}"

    def new_id(self) -> BlobId:
        value = int(self._redis.incrby(self.key_counter(), 1))
        return BlobId(f"{self._prefix}{value:016x}")
