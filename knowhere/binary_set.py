"""Storage of named binary blobs in one file, and index file naming."""

from __future__ import annotations

import os
import struct
from collections.abc import Iterable, Mapping
from pathlib import Path

_HEADER = struct.Struct("<QQ")

BytesLike = bytes | bytearray | memoryview


def write_binary_set(path: str | os.PathLike[str], binaries: Mapping[str, BytesLike]) -> None:
    """Write ``binaries`` to ``path``, ordered by name.

    Each entry is the name length and data length as 64-bit integers,
    followed by the name and then the data.
    """
    with open(path, "wb") as out:
        for name in sorted(binaries):
            encoded = name.encode("utf-8")
            data = bytes(binaries[name])
            out.write(_HEADER.pack(len(encoded), len(data)))
            out.write(encoded)
            out.write(data)


def read_binary_set(path: str | os.PathLike[str]) -> dict[str, bytes]:
    """Read the named blobs written by :func:`write_binary_set`."""
    content = Path(path).read_bytes()
    binaries: dict[str, bytes] = {}
    offset = 0
    while offset < len(content):
        if offset + _HEADER.size > len(content):
            raise ValueError(f"truncated entry header at offset {offset}")
        name_size, data_size = _HEADER.unpack_from(content, offset)
        offset += _HEADER.size
        end = offset + name_size + data_size
        if end > len(content):
            raise ValueError(f"truncated entry at offset {offset}")
        name = content[offset : offset + name_size].decode("utf-8")
        binaries[name] = content[offset + name_size : end]
        offset = end
    return binaries


def index_file_name(test_name: str, index_type: str, params: Iterable[int] = ()) -> str:
    """File name of an index built for ``test_name`` with the given parameters."""
    suffix = "".join(f"_{param}" for param in params)
    return f"{test_name}_{index_type}{suffix}.index"