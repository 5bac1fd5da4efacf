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
"""The blob store interface. A blob store persists opaque byte streams under
ids minted by an `IdGenerator` and returns them by id."""
import io
from contextlib import AbstractContextManager
from typing import IO

from shardstore.system.base import BlobId
from shardstore.system.error import FileStoreError
from shardstore.system.util import get_text_hash


DEFAULT_LEVELS = 2
"""The default number of nested shard folders."""
DEFAULT_HASH = "md5"
"""The default hash algorithm for computing shard folders."""


def shard_path(
        name: str,
        levels: int,
        *,
        hash_name: str = DEFAULT_HASH,
        upper_hex: bool = False) -> list[str]:
    """
    Computes the nested shard folders for the given blob name. Folder `i`
    (1-indexed) consists of the first `i` hex digits of the hash of the name.
    For example, a name with the hash `a1b2...` is stored in `a/a1/` for two
    levels. The result only depends on the arguments.

    Args:
        name (str): The blob name.
        levels (int): The number of nested folders. With 0 levels all blobs
            are stored directly in the root folder.
        hash_name (str, optional): The hash algorithm as understood by
            `hashlib`. Defaults to DEFAULT_HASH.
        upper_hex (bool, optional): Whether the folder names use upper case
            hex digits. Stores created by older tools might use upper case
            folders. Defaults to False.

    Raises:
        ValueError: If the hash algorithm is not available.

    Returns:
        list[str]: The folder names from outermost to innermost.
    """
    if levels <= 0:
        return []
    digest = get_text_hash(name, hash_name)
    if upper_hex:
        digest = digest.upper()
    return [digest[:ix] for ix in range(1, levels + 1)]


class FileStore:
    """A store for blobs of arbitrary size. Content is always streamed so
    memory use does not depend on the size of a blob."""
    def write(self, source: IO[bytes]) -> BlobId:
        """
        Writes the full content of the source to a new blob.

        Args:
            source (IO[bytes]): The readable source. Its length does not need
                to be known in advance.

        Raises:
            BlobExistsError: If the new id is already occupied.
            FileStoreError: If writing failed. A partially written blob is not
                removed and its id must not be reused.

        Returns:
            BlobId: The id of the new blob.
        """
        raise NotImplementedError()

    def write_bytes(self, data: bytes) -> BlobId:
        """
        Writes a blob from memory.

        Args:
            data (bytes): The content.

        Returns:
            BlobId: The id of the new blob.
        """
        return self.write(io.BytesIO(data))

    def write_file(self, fname: str) -> BlobId:
        """
        Writes a blob with the content of a local file.

        Args:
            fname (str): The file to read.

        Raises:
            FileStoreError: If the file cannot be opened. The cause holds the
                underlying error.

        Returns:
            BlobId: The id of the new blob.
        """
        try:
            fin = open(fname, "rb")  # pylint: disable=consider-using-with
        except OSError as err:
            raise FileStoreError(f"cannot open {fname}: {err}") from err
        with fin:
            return self.write(fin)

    def read_stream(
            self, blob_id: BlobId) -> AbstractContextManager[IO[bytes]]:
        """
        Opens a blob for reading. The handle is closed when leaving the
        resource block.

        Args:
            blob_id (BlobId): The blob.

        Raises:
            BlobNotFoundError: If the blob does not exist.

        Returns:
            AbstractContextManager[IO[bytes]]: The resource block yielding a
                buffered reader.
        """
        raise NotImplementedError()

    def read_channel(
            self, blob_id: BlobId) -> AbstractContextManager[IO[bytes]]:
        """
        Opens a blob for unbuffered random access reading. The handle is
        closed when leaving the resource block.

        Args:
            blob_id (BlobId): The blob.

        Raises:
            BlobNotFoundError: If the blob does not exist.

        Returns:
            AbstractContextManager[IO[bytes]]: The resource block yielding the
                raw file.
        """
        raise NotImplementedError()

    def read_bytes(self, blob_id: BlobId) -> bytes:
        """
        Reads the full content of a blob into memory. Use only for small
        blobs.

        Args:
            blob_id (BlobId): The blob.

        Returns:
            bytes: The content.
        """
        with self.read_stream(blob_id) as fin:
            return fin.read()

    def transfer_to(self, blob_id: BlobId, sink: IO[bytes]) -> int:
        """
        Copies the content of a blob to the given sink. The sink is not
        closed.

        Args:
            blob_id (BlobId): The blob.
            sink (IO[bytes]): The writable destination.

        Raises:
            BlobNotFoundError: If the blob does not exist.
            FileStoreError: If copying failed.

        Returns:
            int: The number of bytes copied.
        """
        raise NotImplementedError()

    def exists(self, blob_id: BlobId) -> bool:
        """
        Whether the blob exists.

        Args:
            blob_id (BlobId): The blob.

        Returns:
            bool: True, if the blob exists.
        """
        raise NotImplementedError()

    def remove(self, blob_id: BlobId) -> None:
        """
        Removes a blob.

        Args:
            blob_id (BlobId): The blob.

        Raises:
            BlobNotFoundError: If the blob does not exist.
        """
        raise NotImplementedError()
