"""Self-signed TLS material for the server and its clients.

The generated certificate serves both as the server certificate and as the
CA that client certificates are verified against.
"""

import ipaddress
import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

logger = logging.getLogger(__name__)

KEY_SIZE = 4096
VALIDITY = timedelta(days=3650)


class CertificateError(Exception):
    """Raised when TLS material cannot be generated or written."""


def generate_certificate(
    organization: str = "GophKeeper", key_size: int = KEY_SIZE
) -> tuple[bytes, bytes]:
    """Create a self-signed certificate for 127.0.0.1 and ::1.

    Returns:
        (certificate PEM, private key PEM)
    """
    key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    name = x509.Name(
        [
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization),
            x509.NameAttribute(NameOID.COMMON_NAME, "localhost"),
        ]
    )
    now = datetime.now(UTC)

    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + VALIDITY)
        .add_extension(
            x509.SubjectAlternativeName(
                [
                    x509.DNSName("localhost"),
                    x509.IPAddress(ipaddress.ip_address("127.0.0.1")),
                    x509.IPAddress(ipaddress.ip_address("::1")),
                ]
            ),
            critical=False,
        )
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=False,
                key_encipherment=True,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=True,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(
            x509.ExtendedKeyUsage(
                [ExtendedKeyUsageOID.CLIENT_AUTH, ExtendedKeyUsageOID.SERVER_AUTH]
            ),
            critical=False,
        )
        .add_extension(
            x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False
        )
        .sign(key, hashes.SHA256())
    )

    cert_pem = cert.public_bytes(serialization.Encoding.PEM)
    key_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return cert_pem, key_pem


def ensure_certificates(cert_path: Path, key_path: Path, key_size: int = KEY_SIZE) -> bool:
    """Generate a certificate/key pair unless both files already exist.

    Returns:
        True if new files were written.

    Raises:
        CertificateError: If the files cannot be written.
    """
    if cert_path.exists() and key_path.exists():
        return False

    logger.info(f"Generating self-signed certificate at {cert_path}")
    cert_pem, key_pem = generate_certificate(key_size=key_size)

    try:
        cert_path.parent.mkdir(mode=0o750, parents=True, exist_ok=True)
        key_path.parent.mkdir(mode=0o750, parents=True, exist_ok=True)
        key_path.write_bytes(key_pem)
        key_path.chmod(0o600)
        cert_path.write_bytes(cert_pem)
    except OSError as e:
        raise CertificateError(f"failed to write TLS material: {e}") from e

    return True
