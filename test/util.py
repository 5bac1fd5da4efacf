# Shardstore stores blobs in nested shard folders on the local file system.
# Copyright (C) 2024 Josua Krause
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Utility functions for unit tests."""
import os
import random
import threading
from collections.abc import Iterable
from typing import IO

from shardstore.system.base import BlobId
from shardstore.system.idgen.idgen import IdGenerator
from shardstore.system.io import CHUNK_SIZE
from shardstore.system.logger.event import EventInfo
from shardstore.system.logger.log import EventListener, EventStream
from shardstore.system.store.disk import DiskFileStore


class FixedIdGenerator(IdGenerator):
    """Returns the given names in order. This can be used to fabricate
    colliding ids."""
    def __init__(self, names: Iterable[str]) -> None:
        self._names = list(names)
        self._lock = threading.RLock()

    def new_id(self) -> BlobId:
        with self._lock:
            if not self._names:
                raise ValueError("no more names")
            return BlobId(self._names.pop(0))


class CollectListener(EventListener):
    """Collects all events for later inspection."""
    def __init__(self, *, disable_events: list[str] | None = None) -> None:
        super().__init__(disable_events=disable_events)
        self._events: list[EventInfo] = []
        self._lock = threading.RLock()

    def log_event(self, event: EventInfo) -> None:
        with self._lock:
            self._events.append(event)

    def get_events(self, prefix: str = "") -> list[EventInfo]:
        """
        Returns all collected events with the given name prefix.

        Args:
            prefix (str, optional): The prefix of the event name. Defaults to
                all events.

        Returns:
            list[EventInfo]: The events in order of occurrence.
        """
        with self._lock:
            return [
                event
                for event in self._events
                if event["name"].startswith(prefix)
            ]


def create_store(
        root: str,
        *,
        id_gen: IdGenerator | None = None,
        levels: int = 2,
        chunk_size: int = CHUNK_SIZE,
        ) -> tuple[DiskFileStore, CollectListener]:
    """
    Creates a store for testing that records all its events.

    Args:
        root (str): The root folder.
        id_gen (IdGenerator | None, optional): The id generator. Defaults to
            random ids.
        levels (int, optional): The number of shard levels. Defaults to 2.
        chunk_size (int, optional): The chunk size. Defaults to CHUNK_SIZE.

    Returns:
        tuple[DiskFileStore, CollectListener]: The store and the listener
            receiving all its events.
    """
    # pylint: disable=import-outside-toplevel
    if id_gen is None:
        from shardstore.system.idgen.uuid import UUIDIdGenerator

        id_gen = UUIDIdGenerator()
    listener = CollectListener()
    logger = EventStream()
    logger.add_listener(listener)
    store = DiskFileStore(
        id_gen,
        root,
        levels=levels,
        chunk_size=chunk_size,
        logger=logger)
    return store, listener


def gen_bytes(size: int, *, seed: int = 42) -> bytes:
    """
    Creates deterministic pseudo random content.

    Args:
        size (int): The number of bytes.
        seed (int, optional): The seed. Defaults to 42.

    Returns:
        bytes: The content.
    """
    return random.Random(seed).randbytes(size)


class TrickleReader:
    """A readable stream that returns at most `step` bytes per read even if
    more data is available. Only an empty read signals the end."""
    def __init__(self, data: bytes, step: int) -> None:
        self._data = data
        self._pos = 0
        self._step = step
        self.reads = 0

    def read(self, size: int = -1) -> bytes:
        """
        Reads a few bytes.

        Args:
            size (int, optional): The maximum number of bytes to read.

        Returns:
            bytes: The bytes. Empty at the end of the stream.
        """
        self.reads += 1
        if size < 0:
            size = len(self._data)
        end = min(self._pos + min(size, self._step), len(self._data))
        res = self._data[self._pos:end]
        self._pos = end
        return res


class TrickleWriter:
    """A writable stream that accepts at most `step` bytes per write."""
    def __init__(self, step: int) -> None:
        self._buff = bytearray()
        self._step = step
        self.writes = 0

    def write(self, data: bytes | memoryview) -> int:
        """
        Writes a few bytes.

        Args:
            data (bytes | memoryview): The data.

        Returns:
            int: The number of bytes accepted.
        """
        self.writes += 1
        chunk = bytes(data[:self._step])
        self._buff.extend(chunk)
        return len(chunk)

    def getvalue(self) -> bytes:
        """
        The written content.

        Returns:
            bytes: All bytes written so far.
        """
        return bytes(self._buff)


class FailingReader:
    """A readable stream that fails after a given number of bytes."""
    def __init__(self, data: bytes, fail_after: int) -> None:
        self._data = data
        self._pos = 0
        self._fail_after = fail_after

    def read(self, size: int = -1) -> bytes:
        """
        Reads bytes until the failure point is reached.

        Args:
            size (int, optional): The maximum number of bytes to read.

        Raises:
            OSError: Once the failure point is reached.

        Returns:
            bytes: The bytes.
        """
        if self._pos >= self._fail_after:
            raise OSError(5, "simulated device failure")
        if size < 0:
            size = len(self._data)
        end = min(self._pos + size, self._fail_after, len(self._data))
        res = self._data[self._pos:end]
        self._pos = end
        return res


def list_files(root: str) -> list[str]:
    """
    Lists all files below the given folder.

    Args:
        root (str): The folder.

    Returns:
        list[str]: The paths relative to the folder using `/` as separator.
    """
    res = []
    for path, _, files in os.walk(root):
        rel = os.path.relpath(path, root)
        for fname in files:
            res.append(
                fname if rel == "." else f"{rel.replace(os.sep, '/')}/{fname}")
    return sorted(res)


def as_stream(reader: object) -> IO[bytes]:
    """
    Treats a duck typed reader or writer as binary stream.

    Args:
        reader (object): The object.

    Returns:
        IO[bytes]: The same object.
    """
    return reader  # type: ignore[return-value]
