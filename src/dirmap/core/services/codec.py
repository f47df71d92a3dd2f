from __future__ import annotations

"""
Snapshot Binary Codec.

Serializes a Snapshot into a deterministic little-endian binary layout and
compresses it with Zstandard. Decoding reverses both layers and rejects any
corrupt, truncated or malformed input with a DecodeError.

Layout:
    snapshot  := u64 count, count x (string key, directory)
    directory := u64 size, u64 nfiles, nfiles x file, u64 nchildren, nchildren x string
    file      := u8 type, string name, u64 size
    string    := u64 byte length, UTF-8 bytes

There is no version tag: decode assumes exactly this layout.
"""

import logging
import struct
from typing import List, Tuple

import zstandard as zstd

from dirmap.domain.errors import DecodeError, EncodeError
from dirmap.domain.models import DirectoryRecord, FileRecord, FileType, Snapshot

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = 3

_U8 = struct.Struct("<B")
_U64 = struct.Struct("<Q")

_VALID_TYPE_CODES = frozenset(int(t) for t in FileType)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def encode_snapshot(snapshot: Snapshot, level: int = DEFAULT_LEVEL) -> bytes:
    """
    Serialize and compress a snapshot.

    Keys are written in sorted order so that equal snapshots always encode
    to identical bytes.

    Args:
        snapshot: Aggregated snapshot to persist.
        level: Zstandard compression level.

    Returns:
        bytes: Compressed payload.

    Raises:
        EncodeError: If a value does not fit the layout or compression fails.
    """
    try:
        payload = serialize_snapshot(snapshot)
    except (struct.error, UnicodeEncodeError, ValueError) as e:
        raise EncodeError(f"Failed to serialize snapshot: {e}") from e

    try:
        compressed = zstd.ZstdCompressor(level=level).compress(payload)
    except (zstd.ZstdError, ValueError) as e:
        raise EncodeError(f"Failed to compress snapshot: {e}") from e

    logger.debug(f"Encoded {len(snapshot)} directories: {len(payload)} -> {len(compressed)} bytes")
    return compressed


def decode_snapshot(data: bytes) -> Snapshot:
    """
    Decompress and parse a snapshot produced by encode_snapshot.

    Args:
        data: Compressed payload.

    Returns:
        Snapshot: A freshly built mapping.

    Raises:
        DecodeError: On a corrupt stream or a malformed binary layout.
    """
    dobj = zstd.ZstdDecompressor().decompressobj()
    try:
        payload = dobj.decompress(bytes(data))
    except zstd.ZstdError as e:
        raise DecodeError(f"Corrupt compressed stream: {e}") from e

    if not dobj.eof:
        raise DecodeError("Truncated compressed stream")
    if dobj.unused_data:
        raise DecodeError(f"Unexpected data after compressed frame: {len(dobj.unused_data)} bytes")

    return deserialize_snapshot(payload)


# -----------------------------------------------------------------------------
# BINARY LAYOUT
# -----------------------------------------------------------------------------

def serialize_snapshot(snapshot: Snapshot) -> bytes:
    """Write the uncompressed binary layout."""
    parts: List[bytes] = [_U64.pack(len(snapshot))]

    for key in sorted(snapshot):
        directory = snapshot[key]
        parts.append(_pack_str(key))
        parts.append(_U64.pack(directory.size))

        parts.append(_U64.pack(len(directory.files)))
        for f in directory.files:
            parts.append(_U8.pack(int(f.type)))
            parts.append(_pack_str(f.name))
            parts.append(_U64.pack(f.size))

        parts.append(_U64.pack(len(directory.children)))
        for child in directory.children:
            parts.append(_pack_str(child))

    return b"".join(parts)


def deserialize_snapshot(payload: bytes) -> Snapshot:
    """Parse the uncompressed binary layout."""
    reader = _Reader(payload)
    snapshot: Snapshot = {}

    count = reader.u64()
    for _ in range(count):
        key = reader.string()
        if key in snapshot:
            raise DecodeError(f"Duplicate directory key: {key}")

        size = reader.u64()

        files: List[FileRecord] = []
        for _ in range(reader.u64()):
            code = reader.u8()
            if code not in _VALID_TYPE_CODES:
                raise DecodeError(f"Unknown file type code {code} in '{key}'")
            name = reader.string()
            files.append(FileRecord(type=FileType(code), name=name, size=reader.u64()))

        children = [reader.string() for _ in range(reader.u64())]

        snapshot[key] = DirectoryRecord(size=size, files=files, children=children)

    if not reader.at_end():
        raise DecodeError(f"Unexpected trailing data: {reader.remaining()} bytes")

    return snapshot


def _pack_str(value: str) -> bytes:
    raw = value.encode("utf-8")
    return _U64.pack(len(raw)) + raw


class _Reader:
    """Bounds-checked cursor over the decompressed payload."""

    def __init__(self, payload: bytes) -> None:
        self._buf = memoryview(payload)
        self._pos = 0

    def _take(self, n: int) -> memoryview:
        end = self._pos + n
        if n < 0 or end > len(self._buf):
            raise DecodeError(
                f"Truncated snapshot: needed {n} bytes at offset {self._pos}, "
                f"{len(self._buf) - self._pos} available"
            )
        chunk = self._buf[self._pos:end]
        self._pos = end
        return chunk

    def _unpack(self, fmt: struct.Struct) -> Tuple[int, ...]:
        return fmt.unpack(self._take(fmt.size))

    def u8(self) -> int:
        return self._unpack(_U8)[0]

    def u64(self) -> int:
        return self._unpack(_U64)[0]

    def string(self) -> str:
        raw = self._take(self.u64())
        try:
            return bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid UTF-8 string at offset {self._pos - len(raw)}") from e

    def remaining(self) -> int:
        return len(self._buf) - self._pos

    def at_end(self) -> bool:
        return self._pos == len(self._buf)
