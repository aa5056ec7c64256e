"""Tests for fixed-size chunking and hashing."""

import hashlib

import pytest

from chunkstore.chunker import iter_slices, split_into_chunks, validate_chunk_size
from chunkstore.hasher import compute_digest, is_valid_digest, verify_digest


class TestChunker:
    """Fixed-size chunk boundaries."""

    def test_25_bytes_in_10_byte_chunks(self):
        data = bytes(range(25))
        slices = list(iter_slices(data, 10))

        assert [len(s) for s in slices] == [10, 10, 5]
        assert b"".join(slices) == data

    def test_exact_multiple_has_no_short_tail(self):
        slices = list(iter_slices(b"a" * 30, 10))
        assert [len(s) for s in slices] == [10, 10, 10]

    def test_input_shorter_than_chunk(self):
        assert list(iter_slices(b"abc", 10)) == [b"abc"]

    def test_empty_input_yields_no_chunks(self):
        assert list(iter_slices(b"", 10)) == []
        assert split_into_chunks(b"", 10) == []

    def test_boundaries_are_positional(self):
        data = b"0123456789abcdefghij"
        assert list(iter_slices(data, 10)) == [b"0123456789", b"abcdefghij"]

    @pytest.mark.parametrize("bad_size", [0, -1, 1.5, "10", True, None])
    def test_invalid_chunk_size_rejected(self, bad_size):
        with pytest.raises(ValueError):
            validate_chunk_size(bad_size)
        with pytest.raises(ValueError):
            list(iter_slices(b"data", bad_size))

    def test_split_into_chunks_hashes_each_piece(self):
        data = b"hello world, this is chunked"
        chunks = split_into_chunks(data, 10)

        assert len(chunks) == 3
        for chunk in chunks:
            assert chunk.digest == hashlib.sha256(chunk.data).hexdigest()
            assert chunk.size == len(chunk.data)

    def test_chunking_is_deterministic(self):
        data = bytes(range(256)) * 4
        first = [c.digest for c in split_into_chunks(data, 64)]
        second = [c.digest for c in split_into_chunks(data, 64)]
        assert first == second

    def test_accepts_bytearray_and_memoryview(self):
        data = b"abcdefghijklmnop"
        expected = [c.digest for c in split_into_chunks(data, 4)]
        assert [c.digest for c in split_into_chunks(bytearray(data), 4)] == expected
        assert [c.digest for c in split_into_chunks(memoryview(data), 4)] == expected


class TestHasher:
    """SHA-256 digest helpers."""

    def test_compute_digest_matches_sha256(self):
        assert compute_digest(b"abc") == hashlib.sha256(b"abc").hexdigest()

    def test_identical_bytes_identical_digest(self):
        assert compute_digest(b"same") == compute_digest(b"same")
        assert compute_digest(b"same") != compute_digest(b"diff")

    def test_verify_digest(self):
        digest = compute_digest(b"payload")
        assert verify_digest(b"payload", digest)
        assert not verify_digest(b"tampered", digest)

    def test_is_valid_digest(self):
        assert is_valid_digest(compute_digest(b"x"))
        assert not is_valid_digest("abc")
        assert not is_valid_digest(compute_digest(b"x").upper())
        assert not is_valid_digest("../" + "a" * 61)
        assert not is_valid_digest(None)
