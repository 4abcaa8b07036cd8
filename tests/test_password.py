"""Password hashing tests — bcrypt hash/verify behaviour."""

from pagevault.auth.password import dummy_hash, hash_password, verify_password


def test_hash_is_bcrypt_with_requested_work_factor():
    h = hash_password("pw1", rounds=4)
    assert h.startswith("$2b$04$")
    assert "pw1" not in h


def test_same_password_hashes_differently():
    """Each hash gets its own salt."""
    assert hash_password("pw1", rounds=4) != hash_password("pw1", rounds=4)


def test_verify_correct_and_wrong_password():
    h = hash_password("correct horse", rounds=4)
    assert verify_password("correct horse", h) is True
    assert verify_password("wrong horse", h) is False


def test_verify_malformed_hash_returns_false():
    assert verify_password("pw1", "not-a-bcrypt-hash") is False
    assert verify_password("pw1", "") is False


def test_long_passwords_truncated_to_72_bytes():
    base = "a" * 72
    h = hash_password(base + "tail-one", rounds=4)
    assert verify_password(base + "tail-two", h) is True


def test_dummy_hash_is_cached_and_never_matches_real_input():
    assert dummy_hash(4) is dummy_hash(4)
    assert verify_password("pw1", dummy_hash(4)) is False
