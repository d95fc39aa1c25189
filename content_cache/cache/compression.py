"""
Size estimation and compression for cached values.

Values are measured by their JSON serialization. Large values are stored
as zlib-compressed pickles so they come back with their original types.
Every function here recovers from bad input locally; nothing is raised
to the cache.
"""
import json
import logging
import pickle
import zlib
from typing import Any

from .core import CompressedValue, RawValue, StoredValue

logger = logging.getLogger("cache.compression")

COMPRESSION_LEVEL = 6
PICKLE_PROTOCOL = 4


def _serialize(value: Any) -> bytes:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def estimate_size(value: Any) -> int:
    """
    Estimate the serialized size of a value in bytes.

    Falls back to twice the length of its repr when it does not serialize
    as JSON.
    """
    if isinstance(value, CompressedValue):
        return len(value.payload)
    if isinstance(value, RawValue):
        value = value.value
    try:
        return len(_serialize(value))
    except (TypeError, ValueError, OverflowError, RecursionError) as e:
        logger.debug(f"Size estimate fell back to repr length: {e}")
        try:
            return len(repr(value)) * 2
        except Exception:
            return 0


def compress(value: Any) -> StoredValue:
    """
    Compress a value into its stored form.

    Returns a RawValue when the value cannot be pickled.
    """
    try:
        pickled = pickle.dumps(value, protocol=PICKLE_PROTOCOL)
        return CompressedValue(payload=zlib.compress(pickled, COMPRESSION_LEVEL))
    except (pickle.PicklingError, TypeError, AttributeError, RecursionError, zlib.error) as e:
        logger.warning(f"Compression failed, storing uncompressed: {e}")
        return RawValue(value)


def decompress(stored: StoredValue) -> Any:
    """
    Return the plain value for a stored value.

    A compressed payload that cannot be decoded is returned as-is.
    """
    if isinstance(stored, RawValue):
        return stored.value
    if isinstance(stored, CompressedValue):
        try:
            return pickle.loads(zlib.decompress(stored.payload))
        except (zlib.error, pickle.UnpicklingError, EOFError, ValueError) as e:
            logger.warning(f"Decompression failed, returning stored payload: {e}")
            return stored.payload
    return stored
