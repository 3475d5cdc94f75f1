import hashlib

from interior_manager.server.services.auth import hash_password, token_hash, verify_password


def test_hash_and_verify():
    password_hash, salt = hash_password("s3cret-pass")

    assert verify_password("s3cret-pass", password_hash, salt) is True
    assert verify_password("wrong-pass", password_hash, salt) is False


def test_salt_is_random_and_reusable():
    first_hash, first_salt = hash_password("s3cret-pass")
    second_hash, second_salt = hash_password("s3cret-pass")

    assert first_salt != second_salt
    assert first_hash != second_hash
    assert hash_password("s3cret-pass", first_salt) == (first_hash, first_salt)


def test_token_hash_is_sha256_hex():
    assert token_hash("abc") == hashlib.sha256(b"abc").hexdigest()
    assert len(token_hash("abc")) == 64
