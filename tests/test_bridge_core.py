import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from bridge_core import (
    InvalidIdentifier,
    InvalidPublicKey,
    MAX_TOKEN_BYTES,
    MIN_TOKEN_BYTES,
    decode_public_key,
    generate_token,
    hash_password,
    validate_user_id,
)


class TestTokens:
    def test_token_is_hex_with_256_bits(self):
        token = generate_token()

        assert len(token) == MIN_TOKEN_BYTES * 2
        int(token, 16)

    def test_tokens_are_unique(self):
        tokens = {generate_token() for _ in range(100)}
        assert len(tokens) == 100

    def test_longer_tokens(self):
        assert len(generate_token(64)) == 128

    def test_weak_token_rejected(self):
        with pytest.raises(ValueError):
            generate_token(8)

    def test_largest_token_fits_token_columns(self):
        assert len(generate_token(MAX_TOKEN_BYTES)) == 512

    def test_oversized_token_rejected(self):
        with pytest.raises(ValueError):
            generate_token(MAX_TOKEN_BYTES + 1)

    def test_hash_password(self):
        assert (
            hash_password("password")
            == "5e884898da28047151d0e56f8dc6292773603d0d6aabbdd62a11ef721d1542d8"
        )


class TestIdentifiers:
    @pytest.mark.parametrize("user_id", ["test@storj.io", "first.last+tag@storj.io"])
    def test_valid_ids_returned_unchanged(self, user_id):
        assert validate_user_id(user_id) == user_id

    @pytest.mark.parametrize("user_id", ["user@localhost", "a@b", "dev@storj.test", "ops@host.local"])
    def test_local_and_special_use_domains(self, user_id):
        assert validate_user_id(user_id) == user_id

    @pytest.mark.parametrize("user_id", ["test+storj.io", "", "@storj.io", "test@"])
    def test_invalid_ids(self, user_id):
        with pytest.raises(InvalidIdentifier):
            validate_user_id(user_id)

    @pytest.mark.parametrize("user_id", ["jörg@storj.io", "test@stórj.io"])
    def test_non_ascii_ids(self, user_id):
        with pytest.raises(InvalidIdentifier):
            validate_user_id(user_id)


class TestPublicKeys:
    def _key(self, point_format):
        private_key = ec.generate_private_key(ec.SECP256K1())
        return private_key.public_key().public_bytes(Encoding.X962, point_format).hex()

    def test_compressed_key(self):
        key = decode_public_key(self._key(PublicFormat.CompressedPoint))
        assert isinstance(key.curve, ec.SECP256K1)

    def test_uncompressed_key_rejected(self):
        with pytest.raises(InvalidPublicKey):
            decode_public_key(self._key(PublicFormat.UncompressedPoint))

    def test_not_hex(self):
        with pytest.raises(InvalidPublicKey):
            decode_public_key("not-a-key")

    def test_bad_prefix(self):
        with pytest.raises(InvalidPublicKey):
            decode_public_key("05" + "11" * 32)

    def test_empty(self):
        with pytest.raises(InvalidPublicKey):
            decode_public_key("")
