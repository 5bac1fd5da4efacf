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
"""A blob store using the local file system. Blobs are spread across nested
shard folders derived from a hash of their name so no single folder holds
too many entries."""
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO, NoReturn

from shardstore.system.base import BlobId, is_safe_name
from shardstore.system.error import (
    BlobExistsError,
    BlobNotFoundError,
    FileStoreError,
    StoreConfigError,
)
from shardstore.system.idgen.idgen import IdGenerator
from shardstore.system.io import (
    CHUNK_SIZE,
    copy_from_file,
    copy_to_file,
    ensure_folder,
    normalize_folder,
    open_create,
    open_readb,
)
from shardstore.system.logger.context import add_context
from shardstore.system.logger.log import EventStream
from shardstore.system.store.store import (
    DEFAULT_HASH,
    DEFAULT_LEVELS,
    FileStore,
    shard_path,
)
from shardstore.system.util import check_hash_name, text_hash_size


class DiskFileStore(FileStore):
    """A blob store using the local file system. A blob with name `name` is
    stored at `root/<h[:1]>/<h[:2]>/name` (for two levels) where `h` is the
    hex hash of `name`. With `upper_hex` the folder names use upper case
    hex digits."""
    def __init__(
            self,
            id_gen: IdGenerator,
            root: str,
            *,
            levels: int = DEFAULT_LEVELS,
            hash_name: str = DEFAULT_HASH,
            chunk_size: int = CHUNK_SIZE,
            upper_hex: bool = False,
            logger: EventStream | None = None) -> None:
        check_hash_name(hash_name)
        if levels < 0 or levels > text_hash_size(hash_name):
            raise StoreConfigError(
                f"invalid number of levels {levels} for {hash_name}")
        if chunk_size <= 0:
            raise StoreConfigError(f"invalid chunk size {chunk_size}")
        try:
            self._root = normalize_folder(root)
        except (OSError, ValueError) as err:
            raise FileStoreError(f"cannot use {root} as root: {err}") from err
        self._id_gen = id_gen
        self._levels = levels
        self._hash_name = hash_name
        self._chunk_size = chunk_size
        self._upper_hex = upper_hex
        self._logger = EventStream() if logger is None else logger
        self._logger.log_event(
            "store.open",
            {
                "name": "store",
                "action": "open",
                "root": self._root,
                "levels": self._levels,
                "hash_name": self._hash_name,
                "chunk_size": self._chunk_size,
                "upper_hex": self._upper_hex,
            },
            adjust_ctx={"store": self._root})

    def get_root(self) -> str:
        """
        The root folder of the store.

        Returns:
            str: The absolute path.
        """
        return self._root

    def get_levels(self) -> int:
        """
        The number of nested shard folders.

        Returns:
            int: The number of levels.
        """
        return self._levels

    def get_chunk_size(self) -> int:
        """
        The number of bytes moved per step when copying content.

        Returns:
            int: The chunk size.
        """
        return self._chunk_size

    def _fail(
            self,
            op: str,
            err: FileStoreError,
            cause: BaseException | None = None) -> NoReturn:
        self._logger.log_error(
            f"error.{op}", err.get_code(), exc=err if cause is None else cause)
        raise err from cause

    def _shard_folder(self, name: str) -> str:
        return os.path.join(
            self._root,
            *shard_path(
                name,
                self._levels,
                hash_name=self._hash_name,
                upper_hex=self._upper_hex))

    def get_path(self, blob_id: BlobId) -> str:
        """
        The location of the blob. The blob might not exist.

        Args:
            blob_id (BlobId): The blob.

        Raises:
            ValueError: If the name of the blob cannot be used as file name.

        Returns:
            str: The absolute path of the blob.
        """
        name = blob_id.get_name()
        if not is_safe_name(name):
            raise ValueError(f"invalid blob name: {name!r}")
        res = os.path.join(self._shard_folder(name), name)
        self._logger.log_lazy(
            "debug.shard",
            lambda: {
                "name": "shard",
                "blob": blob_id,
                "path": res,
            })
        return res

    def _get_file(self, blob_id: BlobId, op: str) -> str:
        try:
            fname = self.get_path(blob_id)
        except ValueError as err:
            self._fail(op, BlobNotFoundError(f"{err}"), err)
        folder = os.path.dirname(fname)
        if not os.path.isdir(folder):
            self._fail(
                op, BlobNotFoundError(f"could not find folder at {folder}"))
        if not os.path.isfile(fname):
            self._fail(
                op, BlobNotFoundError(f"could not find file at {fname}"))
        return fname

    def write(self, source: IO[bytes]) -> BlobId:
        blob_id = self._id_gen.new_id()
        with add_context({"store": self._root, "blob": blob_id}):
            try:
                fname = self.get_path(blob_id)
            except ValueError as err:
                self._fail("write", StoreConfigError(f"{err}"), err)
            folder = os.path.dirname(fname)
            try:
                ensure_folder(folder)
            except OSError as err:
                self._fail(
                    "write",
                    FileStoreError(f"cannot create folder {folder}: {err}"),
                    err)
            try:
                with open_create(fname) as fout:
                    size = copy_to_file(
                        source, fout, chunk_size=self._chunk_size)
            except FileExistsError as err:
                self._fail(
                    "write",
                    BlobExistsError(f"file already exists at {fname}"),
                    err)
            except OSError as err:
                self._fail(
                    "write",
                    FileStoreError(f"cannot write {blob_id}: {err}"),
                    err)
            self._logger.log_event(
                "blob.write",
                {
                    "name": "blob",
                    "action": "write",
                    "blob": blob_id,
                    "size": size,
                })
        return blob_id

    def _open_read(self, blob_id: BlobId, *, buffered: bool) -> IO[bytes]:
        with add_context({"store": self._root, "blob": blob_id}):
            fname = self._get_file(blob_id, "read")
            try:
                fin = open_readb(fname, buffered=buffered)
            except FileNotFoundError as err:
                self._fail(
                    "read",
                    BlobNotFoundError(f"could not find file at {fname}"),
                    err)
            except OSError as err:
                self._fail(
                    "read",
                    FileStoreError(f"cannot read {blob_id}: {err}"),
                    err)
            self._logger.log_event(
                "blob.read",
                {
                    "name": "blob",
                    "action": "read",
                    "blob": blob_id,
                })
        return fin

    @contextmanager
    def read_stream(self, blob_id: BlobId) -> Iterator[IO[bytes]]:
        with self._open_read(blob_id, buffered=True) as fin:
            yield fin

    @contextmanager
    def read_channel(self, blob_id: BlobId) -> Iterator[IO[bytes]]:
        with self._open_read(blob_id, buffered=False) as fin:
            yield fin

    def transfer_to(self, blob_id: BlobId, sink: IO[bytes]) -> int:
        with add_context({"store": self._root, "blob": blob_id}):
            fname = self._get_file(blob_id, "transfer")
            try:
                with open_readb(fname, buffered=False) as fin:
                    size = copy_from_file(
                        fin, sink, chunk_size=self._chunk_size)
            except FileNotFoundError as err:
                self._fail(
                    "transfer",
                    BlobNotFoundError(f"could not find file at {fname}"),
                    err)
            except OSError as err:
                self._fail(
                    "transfer",
                    FileStoreError(f"cannot transfer {blob_id}: {err}"),
                    err)
            self._logger.log_event(
                "blob.transfer",
                {
                    "name": "blob",
                    "action": "transfer",
                    "blob": blob_id,
                    "size": size,
                })
        return size

    def exists(self, blob_id: BlobId) -> bool:
        try:
            return os.path.isfile(self.get_path(blob_id))
        except ValueError:
            return False

    def remove(self, blob_id: BlobId) -> None:
        with add_context({"store": self._root, "blob": blob_id}):
            fname = self._get_file(blob_id, "remove")
            try:
                os.remove(fname)
            except FileNotFoundError as err:
                self._fail(
                    "remove",
                    BlobNotFoundError(f"could not find file at {fname}"),
                    err)
            except OSError as err:
                # NOTE: the blob might still exist
                self._logger.log_warning(
                    "warning.remove", f"cannot remove {fname}: {err}")
                return
            self._logger.log_event(
                "blob.remove",
                {
                    "name": "blob",
                    "action": "remove",
                    "blob": blob_id,
                })
