"""
Tests for digests and hash parameters.
"""

import pytest
from pydantic import ValidationError

from zkmerkle.hashing import Digest, HashParams
from zkmerkle.koalabear import Fp, P


def test_byte_encoding() -> None:
    digest = Digest(elements=(Fp(value=1), Fp(value=P - 1)))
    data = bytes(digest)

    assert len(digest) == 2
    assert data == b"\x01\x00\x00\x00" + (P - 1).to_bytes(4, "little")
    assert Digest.from_bytes(data) == digest
    assert digest.hex() == data.hex()


@pytest.mark.parametrize("data", [b"", b"\x00" * 5])
def test_from_bytes_rejects_bad_lengths(data: bytes) -> None:
    with pytest.raises(ValueError, match="multiple of 4 bytes"):
        Digest.from_bytes(data)


def test_digests_compare_and_hash_by_value() -> None:
    a = Digest(elements=(Fp(value=3),))
    b = Digest(elements=(Fp(value=3),))
    assert a == b
    assert len({a, b}) == 1


def test_empty_containers_are_rejected() -> None:
    with pytest.raises(ValidationError):
        Digest(elements=())
    with pytest.raises(ValidationError):
        HashParams(elements=())


def test_containers_are_strict() -> None:
    """Elements must already be field elements."""
    with pytest.raises(ValidationError):
        Digest(elements=(1, 2))  # type: ignore[arg-type]
    with pytest.raises(ValidationError):
        Digest(elements=[Fp(value=1)])  # type: ignore[arg-type]
