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
"""Generates random ids."""
import uuid

from shardstore.system.base import BlobId
from shardstore.system.idgen.idgen import IdGenerator


class UUIDIdGenerator(IdGenerator):
    """Generates ids from random UUIDs. Names consist of a `B` prefix and the
    32 hex digits of the UUID."""
    def new_id(self) -> BlobId:
        return BlobId(f"B{uuid.uuid4().hex}")
