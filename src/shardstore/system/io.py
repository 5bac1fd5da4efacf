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
"""A collection of useful IO operations. Blob content is always moved in
chunks of bounded size so memory use does not depend on the blob size."""
import contextlib
import errno
import io
import os
from collections.abc import Iterator
from typing import IO, overload


CHUNK_SIZE = 16 * 1024  # 16KiB
"""The default size of a single chunk when copying blob content."""


def normalize_folder(folder: str) -> str:
    """
    Normalizes a folder path and ensures it exists.

    Args:
        folder (str): The folder.

    Returns:
        str: The normalized path.
    """
    res = os.path.abspath(folder)
    os.makedirs(res, mode=0o777, exist_ok=True)
    if not os.path.isdir(res):
        raise ValueError(f"{folder} must be a folder")
    return res


@overload
def ensure_folder(folder: str) -> str:
    ...


@overload
def ensure_folder(folder: None) -> None:
    ...


def ensure_folder(folder: str | None) -> str | None:
    """
    Ensures that a folder exist. Input can be `None` in which case the function
    is a no-op. Concurrent calls for the same folder are safe.

    Args:
        folder (str | None): The folder.

    Returns:
        str | None: The folder.
    """
    if folder is not None and not os.path.exists(folder):
        os.makedirs(folder, mode=0o777, exist_ok=True)
    return folder


@contextlib.contextmanager
def open_create(filename: str) -> Iterator[IO[bytes]]:
    """
    Exclusively creates a new file and opens it for writing in binary mode.
    Existence check and creation are a single atomic step.

    Args:
        filename (str): The file. Its folder must exist.

    Raises:
        FileExistsError: If the file already exists.

    Yields:
        IO[bytes]: The unbuffered file handle.
    """
    fd = os.open(
        filename,
        os.O_CREAT | os.O_EXCL | os.O_WRONLY | getattr(os, "O_BINARY", 0),
        0o666)
    with io.FileIO(fd, "wb", closefd=True) as fout:
        yield fout


def open_readb(filename: str, *, buffered: bool = True) -> IO[bytes]:
    """
    Open a file for reading in binary mode. Failures are raised immediately.
    The caller owns the returned handle.

    Args:
        filename (str): The file.
        buffered (bool, optional): Whether to wrap the raw file in a buffered
            reader. Defaults to True.

    Returns:
        IO[bytes]: The file handle for reading.
    """
    if buffered:
        return open(filename, "rb")  # pylint: disable=consider-using-with
    return io.FileIO(filename, "rb")


def read_chunk(src: IO[bytes], buff: memoryview) -> int:
    """
    Reads at most `len(buff)` bytes from the source into the buffer.

    Args:
        src (IO[bytes]): The source. It must be in blocking mode.
        buff (memoryview): The buffer to fill.

    Raises:
        BlockingIOError: If the source is in non-blocking mode and has no
            data available.

    Returns:
        int: The number of bytes read. 0 signals the end of the stream.
    """
    readinto = getattr(src, "readinto", None)
    if readinto is not None:
        res = readinto(buff)
    else:
        data = src.read(len(buff))
        res = None if data is None else len(data)
        if res:
            buff[:res] = data
    if res is None:
        raise BlockingIOError(
            errno.EAGAIN, "cannot copy from a non-blocking source")
    return res


def write_fully(dest: IO[bytes], data: bytes | memoryview) -> int:
    """
    Writes all bytes to the destination. Raw streams might accept only part
    of the data per call so writing continues until nothing is left.

    Args:
        dest (IO[bytes]): The destination.
        data (bytes | memoryview): The data to write.

    Raises:
        BlockingIOError: If the destination is in non-blocking mode and
            cannot accept data.

    Returns:
        int: The number of bytes written.
    """
    view = memoryview(data)
    total = len(view)
    while view:
        written = dest.write(view)
        if written is None:
            raise BlockingIOError(
                errno.EAGAIN, "cannot copy to a non-blocking destination")
        view = view[written:]
    return total


def channel_copy(
        src: IO[bytes],
        dest: IO[bytes],
        *,
        chunk_size: int = CHUNK_SIZE) -> int:
    """
    Copies all bytes from one stream to another using a single buffer of
    fixed size. The copy ends when the source signals the end of the stream.

    Args:
        src (IO[bytes]): The source stream.
        dest (IO[bytes]): The destination stream.
        chunk_size (int, optional): The buffer size. Defaults to CHUNK_SIZE.

    Returns:
        int: The number of bytes copied.
    """
    buff = memoryview(bytearray(chunk_size))
    total = 0
    while True:
        size = read_chunk(src, buff)
        if size == 0:
            break
        total += write_fully(dest, buff[:size])
    return total


def copy_to_file(
        src: IO[bytes],
        fout: IO[bytes],
        *,
        chunk_size: int = CHUNK_SIZE) -> int:
    """
    Copies all bytes from a stream into a file. Each chunk is written at its
    absolute position in the file, starting at offset 0.

    Args:
        src (IO[bytes]): The source stream.
        fout (IO[bytes]): The destination file. It must be backed by a file
            descriptor.
        chunk_size (int, optional): The maximum number of bytes moved per
            step. Defaults to CHUNK_SIZE.

    Returns:
        int: The number of bytes copied.
    """
    fd = fout.fileno()
    buff = memoryview(bytearray(chunk_size))
    position = 0
    while True:
        size = read_chunk(src, buff)
        if size == 0:
            break
        chunk = buff[:size]
        while chunk:
            written = os.pwrite(fd, chunk, position)
            position += written
            chunk = chunk[written:]
    return position


def copy_from_file(
        fin: IO[bytes],
        dest: IO[bytes],
        *,
        chunk_size: int = CHUNK_SIZE) -> int:
    """
    Copies all bytes of a file into a stream. Each chunk is read from its
    absolute position in the file, starting at offset 0, independent of the
    current cursor of the file handle.

    Args:
        fin (IO[bytes]): The source file. It must be backed by a file
            descriptor.
        dest (IO[bytes]): The destination stream.
        chunk_size (int, optional): The maximum number of bytes moved per
            step. Defaults to CHUNK_SIZE.

    Returns:
        int: The number of bytes copied.
    """
    fd = fin.fileno()
    position = 0
    while True:
        data = os.pread(fd, chunk_size, position)
        if not data:
            break
        position += write_fully(dest, data)
    return position
