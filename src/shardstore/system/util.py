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
"""This module provides some utility functions."""
import hashlib
import json
from datetime import datetime, timezone
from typing import Any, NoReturn

from shardstore.system.error import StoreConfigError


def is_partial_match(target: str, pattern: str) -> bool:
    """
    Checks whether pattern is a partial match of target. Target is a string
    denoting a hierarchy path separated by '.'. If pattern starts with a '.'
    the check is for any full path segment. Otherwise the pattern is checked
    from the beginning of target and only matches full path segments.

    Examples:
    | Target           | Pattern  | Match   |
    | ---------------- | -------- | ------- |
    | `blob.write`     | `blob`   | `True`  |
    | `blobs`          | `blob`   | `False` |
    | `blob.write`     | `write`  | `False` |
    | `blob.write`     | `.write` | `True`  |
    | `error.write.io` | `.write` | `True`  |
    | `blob.writes`    | `.write` | `False` |

    Args:
        target (str): The target.
        pattern (str): The pattern.

    Returns:
        bool: Whether the target matches the pattern.
    """
    if pattern.startswith("."):
        if target.endswith(pattern):
            return True
        return target.find(f"{pattern}.") >= 0
    if target == pattern:
        return True
    return target.startswith(f"{pattern}.")


def full_name(cls: type) -> str:
    """
    Return the fully qualified name of the given type.
    Examples: `str`, `shardstore.system.idgen.idgen.IdGenerator`

    Args:
        cls (type): The type.

    Returns:
        str: The fully qualified name of the type.
    """
    module = cls.__module__
    qualname = cls.__qualname__
    if module == "builtins":
        return qualname
    return f"{module}.{qualname}"


def now() -> datetime:
    """
    Computes the current time with UTC timezone.

    Returns:
        datetime: A timezone aware instance of now.
    """
    return datetime.now(timezone.utc).astimezone()


def fmt_time(when: datetime) -> str:
    """
    Formats a timestamp as ISO formatted string.

    Args:
        when (datetime): The timestamp.

    Returns:
        str: The formatted string.
    """
    return when.isoformat()


def to_bool(text: str | bool | None) -> bool:
    """
    Makes a best effort conversion of the value to a boolean. If the value is
    None it is interpreted as False. If the value is a number or can be parsed
    as number it is interpreted as False exactly if the number is 0. Otherwise,
    any string except for case insensitive `true` values is interpreted as
    False.

    Args:
        text (str | bool | None): The value to convert.

    Returns:
        bool: The converted boolean.
    """
    if text is None:
        return False
    if isinstance(text, bool):
        return text
    try:
        return int(text) > 0
    except ValueError:
        pass
    return f"{text}".lower() == "true"


def check_hash_name(hash_name: str) -> str:
    """
    Verifies that the given hash algorithm is available.

    Args:
        hash_name (str): The name of the algorithm as understood by `hashlib`.

    Raises:
        StoreConfigError: If the algorithm is not available or does not
            produce a fixed length digest.

    Returns:
        str: The hash name.
    """
    try:
        hasher = hashlib.new(hash_name, usedforsecurity=False)
    except ValueError as err:
        raise StoreConfigError(
            f"hash algorithm {hash_name!r} is not available") from err
    if hasher.digest_size <= 0:
        # shake algorithms require an explicit length
        raise StoreConfigError(
            f"hash algorithm {hash_name!r} has no fixed digest size")
    return hash_name


def get_text_hash(text: str, hash_name: str) -> str:
    """
    Computes a hash for the given text. The length of the resulting
    hash string can be retrieved via :py:function::`text_hash_size`.

    Args:
        text (str): The text.
        hash_name (str): The name of the algorithm as understood by `hashlib`.

    Returns:
        str: The hash as lowercase hex string.
    """
    hasher = hashlib.new(hash_name, usedforsecurity=False)
    hasher.update(text.encode("utf-8"))
    return hasher.hexdigest()


def text_hash_size(hash_name: str) -> int:
    """
    The size of the hash string generated by :py:function::`get_text_hash`.

    Args:
        hash_name (str): The name of the algorithm as understood by `hashlib`.

    Returns:
        int: The length of the hash string.
    """
    return hashlib.new(hash_name, usedforsecurity=False).digest_size * 2


def report_json_error(err: json.JSONDecodeError) -> NoReturn:
    """
    Reports a JSON error by adding additional information about where the
    error is located in the JSON.

    Args:
        err (json.JSONDecodeError): The original error.

    Raises:
        ValueError: The amended error.
    """
    raise ValueError(
        f"JSON parse error ({err.lineno}:{err.colno}): "
        f"{repr(err.doc)}") from err


def json_read(data: str) -> Any:
    """
    Parses data as JSON.

    Args:
        data (str): The data to parse.

    Raises:
        ValueError: If the data couldn't be parsed.

    Returns:
        Any: The JSON object. Make sure to validate the expected layout.
    """
    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        report_json_error(e)
