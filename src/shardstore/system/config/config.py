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
"""Configurations connect the id generator, the blob store, and the logger."""
from shardstore.system.idgen.idgen import IdGenerator
from shardstore.system.logger.log import EventStream
from shardstore.system.store.store import FileStore


class Config:
    """Configurations connect different modules together. Modules are set
    once after creation."""
    def __init__(self) -> None:
        """
        Create an empty configuration.
        """
        self._logger: EventStream | None = None
        self._id_gen: IdGenerator | None = None
        self._store: FileStore | None = None

    def set_logger(self, logger: EventStream) -> None:
        """
        Set the logger.

        Args:
            logger (EventStream): The event stream.

        Raises:
            ValueError: If the logger was already set.
        """
        if self._logger is not None:
            raise ValueError("logger already initialized")
        self._logger = logger

    def get_logger(self) -> EventStream:
        """
        Get the logger.

        Raises:
            ValueError: If no logger was set.

        Returns:
            EventStream: The event stream.
        """
        if self._logger is None:
            raise ValueError("logger not initialized")
        return self._logger

    def set_id_generator(self, id_gen: IdGenerator) -> None:
        """
        Set the id generator.

        Args:
            id_gen (IdGenerator): The id generator.

        Raises:
            ValueError: If the id generator was already set.
        """
        if self._id_gen is not None:
            raise ValueError("id generator already initialized")
        self._id_gen = id_gen

    def get_id_generator(self) -> IdGenerator:
        """
        Get the id generator.

        Raises:
            ValueError: If no id generator was set.

        Returns:
            IdGenerator: The id generator.
        """
        if self._id_gen is None:
            raise ValueError("id generator not initialized")
        return self._id_gen

    def set_store(self, store: FileStore) -> None:
        """
        Set the blob store.

        Args:
            store (FileStore): The blob store.

        Raises:
            ValueError: If the blob store was already set.
        """
        if self._store is not None:
            raise ValueError("store already initialized")
        self._store = store

    def get_store(self) -> FileStore:
        """
        Get the blob store.

        Raises:
            ValueError: If no blob store was set.

        Returns:
            FileStore: The blob store.
        """
        if self._store is None:
            raise ValueError("store not initialized")
        return self._store
