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
"""This module defines the blob identifier. Identifiers are minted by an
`IdGenerator` and their names are used verbatim as file names."""
import os


DEBUG_OUTPUT_LENGTH: int | None = None
"""The length of the id shown when debugging. The id is truncated to this
length for easier readability. If it's set to None the full id is shown."""


def set_debug_output_length(output_length: int | None) -> None:
    """
    Sets the length of ids when shown in debug outputs.

    Args:
        output_length (int | None): The maximum display length. If None the
            full id is shown.
    """
    global DEBUG_OUTPUT_LENGTH  # pylint: disable=global-statement

    DEBUG_OUTPUT_LENGTH = output_length


def trim_id(text_id: str) -> str:
    """
    Prepares the text representation of an id for user output. The id might
    get truncated based on the debug settings.

    Args:
        text_id (str): The id representation to prepare.

    Returns:
        str: The potentially truncated id representation.
    """
    if DEBUG_OUTPUT_LENGTH is None:
        return text_id
    return text_id[:DEBUG_OUTPUT_LENGTH]


UNSAFE_CHARS: frozenset[str] = frozenset({"/", "\\", "\0", os.sep})
"""Characters that must not appear in a blob name."""


def is_safe_name(name: str) -> bool:
    """
    Whether the name can be used as a single file name component.

    Args:
        name (str): The name.

    Returns:
        bool: True, if the name is non-empty, not a relative folder
            reference, and contains no path separators.
    """
    if not name or name in (".", ".."):
        return False
    return not any(char in UNSAFE_CHARS for char in name)


class BlobId:
    """
    An opaque identifier of a stored blob. The name is printable and path
    safe. Two ids are equal if their names are equal.
    """
    def __init__(self, name: str) -> None:
        """
        Creates an id. Do not call this function directly from user code.
        Use `parse` or an `IdGenerator` instead.

        Args:
            name (str): The name.
        """
        self._name = name

    @classmethod
    def parse(cls, text: str) -> 'BlobId':
        """
        Parses a string into an id. Use `get_name` to obtain a parseable
        string.

        Args:
            text (str): The name of the id.

        Raises:
            ValueError: If the string cannot be used as file name.

        Returns:
            BlobId: The id.
        """
        if not is_safe_name(text):
            raise ValueError(f"invalid {cls.__name__}: {text!r}")
        return cls(text)

    def get_name(self) -> str:
        """
        The name of the id. The name is used as file name of the blob.

        Returns:
            str: The name.
        """
        return self._name

    def to_parseable(self) -> str:
        """
        Creates a parseable representation of the id.

        Returns:
            str: A string that can be parsed by `parse`.
        """
        return self._name

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, BlobId):
            return False
        return self._name == other._name

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash(self._name)

    def __str__(self) -> str:
        return f"[{trim_id(self._name)}]"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}{self.__str__()}"
