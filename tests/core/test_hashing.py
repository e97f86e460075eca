import hashlib
import io

from slpx.core.hashing import hash_replay


def test_hash_replay_matches_sha256_of_bytes() -> None:
    data = b"{U\x03raw[$U#l" + bytes(range(256)) * 9000  # spans several chunks

    assert hash_replay(io.BytesIO(data)) == hashlib.sha256(data).hexdigest()


def test_hash_replay_copies_into_sink() -> None:
    data = b"replay-bytes" * 1000
    sink = io.BytesIO()

    digest = hash_replay(io.BytesIO(data), sink=sink)

    assert sink.getvalue() == data
    assert digest == hashlib.sha256(data).hexdigest()
