"""RSA key generation and archive signing.

A new key pair is generated for every build, so each container carries a new
public key and therefore a new extension ID. The archive bytes are signed with
RSA PKCS#1 v1.5 over SHA-256.
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import Union

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .constants import CrxConstants
from .errors import CryptoFailure

logger = logging.getLogger(__name__)

PublicKeyInput = Union[rsa.RSAPublicKey, str, bytes]


@dataclass(frozen=True)
class KeyPair:
    """Freshly generated signing key and its DER encoded public half."""

    public_key_der: bytes
    """SubjectPublicKeyInfo DER bytes"""
    private_key: rsa.RSAPrivateKey
    """Signing-capable private key"""

    @property
    def extension_id(self) -> str:
        return SigningUtils.extension_id(self.public_key_der)


class SigningUtils:
    """Static helpers for keys and signatures."""

    @staticmethod
    def generate_key_pair(key_size: int = CrxConstants.DEFAULT_KEY_SIZE) -> KeyPair:
        """Generate a new RSA key pair.

        Args:
            key_size: Modulus size in bits

        Returns:
            KeyPair with the DER public key and the private key

        Raises:
            CryptoFailure: If key generation fails
        """
        try:
            private_key = rsa.generate_private_key(
                public_exponent=CrxConstants.PUBLIC_EXPONENT,
                key_size=key_size,
            )
        except (ValueError, UnsupportedAlgorithm) as e:
            raise CryptoFailure(f"Key generation failed: {e}", stage="keygen") from e

        public_key_der = SigningUtils.encode_public_key(private_key.public_key())
        logger.debug("Generated %d-bit RSA key", key_size)
        return KeyPair(public_key_der=public_key_der, private_key=private_key)

    @staticmethod
    def encode_public_key(public_key: PublicKeyInput) -> bytes:
        """Encode a public key as DER SubjectPublicKeyInfo.

        Args:
            public_key: Key object, or PEM text/bytes of a public key

        Returns:
            DER bytes

        Raises:
            CryptoFailure: If the PEM cannot be parsed
        """
        if isinstance(public_key, (str, bytes)):
            pem = public_key.encode("ascii") if isinstance(public_key, str) else public_key
            try:
                public_key = serialization.load_pem_public_key(pem)
            except (ValueError, UnsupportedAlgorithm) as e:
                raise CryptoFailure(f"Invalid public key PEM: {e}", stage="keygen") from e

        return public_key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    @staticmethod
    def sign(private_key: rsa.RSAPrivateKey, data: bytes) -> bytes:
        """Sign bytes with RSA PKCS#1 v1.5 and SHA-256.

        Args:
            private_key: Signing key
            data: Exact archive bytes that will be embedded in the container

        Returns:
            Signature bytes (key_size / 8 long)

        Raises:
            CryptoFailure: If signing fails
        """
        try:
            return private_key.sign(data, padding.PKCS1v15(), hashes.SHA256())
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise CryptoFailure(f"Signing failed: {e}", stage="signing") from e

    @staticmethod
    def verify(public_key_der: bytes, signature: bytes, data: bytes) -> bool:
        """Check a signature produced by sign().

        Args:
            public_key_der: DER SubjectPublicKeyInfo of the signer
            signature: Signature bytes
            data: Signed bytes

        Returns:
            True if the signature is valid for data
        """
        try:
            public_key = serialization.load_der_public_key(public_key_der)
        except (ValueError, UnsupportedAlgorithm):
            return False
        if not isinstance(public_key, rsa.RSAPublicKey):
            return False
        try:
            public_key.verify(signature, data, padding.PKCS1v15(), hashes.SHA256())
        except InvalidSignature:
            return False
        return True

    @staticmethod
    def private_key_pem(private_key: rsa.RSAPrivateKey) -> bytes:
        """Serialize a private key as unencrypted PKCS#8 PEM."""
        return private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    @staticmethod
    def extension_id(public_key_der: bytes) -> str:
        """Derive the browser extension ID from a public key.

        The ID is the first 16 bytes of SHA-256(DER) written as hex, with
        each hex digit 0-f mapped to a letter a-p.

        Args:
            public_key_der: DER SubjectPublicKeyInfo bytes

        Returns:
            32 character ID
        """
        digest = hashlib.sha256(public_key_der).hexdigest()[: CrxConstants.EXTENSION_ID_BYTES * 2]
        return "".join(CrxConstants.EXTENSION_ID_ALPHABET[int(c, 16)] for c in digest)
