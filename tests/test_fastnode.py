import os

import pytest

from iavl.encoding import DecodeError
from iavl.fastnode import FastNode


def test_encoded_size():
    node = FastNode(key=os.urandom(10), version_last_updated_at=1, value=os.urandom(20))
    assert node.encoded_size() == 1 + 20 + 1


def test_encoded_size_matches_serialised_length():
    node = FastNode(key=b"k", version_last_updated_at=123456789, value=b"v" * 300)
    assert node.encoded_size() == len(node.to_bytes())


@pytest.mark.parametrize(
    "node, expect_hex",
    [
        (FastNode(), "0000"),
        (FastNode(key=b"\x04", version_last_updated_at=1, value=b"\x02"), "020102"),
    ],
)
def test_encode_decode(node, expect_hex):
    data = node.to_bytes()
    assert data.hex() == expect_hex
    decoded = FastNode.deserialize(node.key, data)
    assert decoded == node


def test_write_without_value_fails():
    node = FastNode(key=b"a", version_last_updated_at=1, value=None)
    with pytest.raises(ValueError):
        node.to_bytes()


def test_deserialize_empty_buffer_fails():
    with pytest.raises(DecodeError, match="fastnode.version"):
        FastNode.deserialize(b"key", b"")


def test_deserialize_truncated_value_fails():
    with pytest.raises(DecodeError, match="fastnode.value"):
        FastNode.deserialize(b"key", b"\x02\x05ab")


def test_deserialize_keeps_key():
    node = FastNode.deserialize(b"mykey", b"\x04\x03abc")
    assert node.key == b"mykey"
    assert node.version_last_updated_at == 2
    assert node.value == b"abc"