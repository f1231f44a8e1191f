"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file hashing utilities using the FileRecord class and pluggable hash algorithms.

HasherImpl streams a file (or only its first N bytes) through the algorithm
and truncates the digest to the configured HashWidth. Nothing is cached on the
records themselves: FileRecord is immutable, the engine keeps what it needs.
"""

import filecmp
import logging

import xxhash

from dedup.core.models import FileRecord, HashWidth, DeduplicationConfig
from dedup.core.interfaces import Hasher, HashAlgorithm, HashState, ContentComparer

logger = logging.getLogger(__name__)


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    @staticmethod
    def new() -> HashState:
        return xxhash.xxh3_64()


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    """

    def __init__(
        self,
        algorithm: HashAlgorithm = None,
        width: HashWidth = HashWidth.BITS_64,
        buffer_size: int = DeduplicationConfig.READ_BUFFER_SIZE
    ):
        self.algorithm = algorithm or XXHashAlgorithmImpl()
        self.width = width
        self.buffer_size = buffer_size

    def compute_full_hash(self, file: FileRecord) -> int:
        """Hash of the entire content of a file. Raises OSError on read failure."""
        return self._hash_file(file.path, None)

    def compute_short_hash(self, file: FileRecord, num_bytes: int) -> int:
        """
        Hash of the first `num_bytes` of a file.
        0 means the whole file, as does any length past the end of the file.
        """
        if num_bytes <= 0:
            return self.compute_full_hash(file)
        return self._hash_file(file.path, num_bytes)

    def _hash_file(self, path: str, limit) -> int:
        state = self.algorithm.new()
        remaining = limit
        with open(path, 'rb') as f:
            while True:
                to_read = self.buffer_size if remaining is None else min(self.buffer_size, remaining)
                if to_read == 0:
                    break
                chunk = f.read(to_read)
                if not chunk:
                    break
                state.update(chunk)
                if remaining is not None:
                    remaining -= len(chunk)
        return state.intdigest() & self.width.mask


class ByteComparer(ContentComparer):
    """Byte-for-byte comparison, hash equality is never taken as proof."""

    def same_content(self, first: FileRecord, second: FileRecord) -> bool:
        if first.size != second.size:
            return False
        logger.debug(f"Comparing {first.path} with {second.path}")
        return filecmp.cmp(first.path, second.path, shallow=False)
