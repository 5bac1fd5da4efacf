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
"""Identifier generators mint the names under which blobs are stored."""
from shardstore.system.base import BlobId


class IdGenerator:
    """Creates fresh blob ids. An id returned by `new_id` is never returned
    again by the same generator. Names must be usable as file names."""
    def new_id(self) -> BlobId:
        """
        Creates a new id.

        Returns:
            BlobId: An id that has not been issued before.
        """
        raise NotImplementedError()
