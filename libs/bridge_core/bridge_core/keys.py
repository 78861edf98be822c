from cryptography.hazmat.primitives.asymmetric import ec

# Keys are registered in SEC1 compressed form only: 0x02/0x03 prefix + 32 byte x
COMPRESSED_KEY_BYTES = 33


class InvalidPublicKey(ValueError):
    """Raised when a public key is not a hex encoded, compressed secp256k1 point."""


def decode_public_key(pubkey_hex: str) -> ec.EllipticCurvePublicKey:
    """Decode a hex encoded compressed SEC1 public key and verify it lies on secp256k1."""
    try:
        raw = bytes.fromhex(pubkey_hex)
    except (TypeError, ValueError) as e:
        raise InvalidPublicKey("invalid public key") from e

    if len(raw) != COMPRESSED_KEY_BYTES:
        raise InvalidPublicKey("invalid public key")

    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), raw)
    except ValueError as e:
        raise InvalidPublicKey("invalid public key") from e
