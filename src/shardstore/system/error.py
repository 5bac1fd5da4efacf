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
"""Typed errors raised by the blob store. All store errors derive from
`FileStoreError` so callers can catch store failures uniformly. Underlying
`OSError`s are kept as `__cause__`."""
from typing import Literal


ErrorCode = Literal[
    "not_found",
    "exists",
    "io",
    "config",
]
"""The type of error."""


class FileStoreError(Exception):
    """A blob store operation failed. Inspect `__cause__` for the underlying
    filesystem error (e.g., to distinguish a full disk from missing
    permissions)."""
    def __init__(self, message: str, *, code: ErrorCode = "io") -> None:
        super().__init__(message)
        self._code = code

    def get_code(self) -> ErrorCode:
        """
        The type of error.

        Returns:
            ErrorCode: The error code.
        """
        return self._code


class BlobNotFoundError(FileStoreError):
    """The shard folder or the file of a blob does not exist."""
    def __init__(self, message: str) -> None:
        super().__init__(message, code="not_found")


class BlobExistsError(FileStoreError):
    """A write targets a path that is already occupied. Identifiers must
    never be written twice so this indicates misuse and is not retried."""
    def __init__(self, message: str) -> None:
        super().__init__(message, code="exists")


class StoreConfigError(FileStoreError):
    """The store or one of its modules is misconfigured."""
    def __init__(self, message: str) -> None:
        super().__init__(message, code="config")
