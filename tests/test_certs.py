"""Tests for self-signed TLS material."""

import ipaddress
import stat

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.x509.oid import ExtendedKeyUsageOID

from gophkeeper.services.certs import CertificateError, ensure_certificates, generate_certificate

# Small keys keep the tests fast
TEST_KEY_SIZE = 2048


@pytest.fixture(scope="module")
def cert_and_key():
    return generate_certificate(key_size=TEST_KEY_SIZE)


class TestGenerateCertificate:
    def test_pem_output(self, cert_and_key):
        cert_pem, key_pem = cert_and_key
        assert cert_pem.startswith(b"-----BEGIN CERTIFICATE-----")
        assert b"PRIVATE KEY" in key_pem

    def test_key_matches_certificate(self, cert_and_key):
        cert_pem, key_pem = cert_and_key
        cert = x509.load_pem_x509_certificate(cert_pem)
        key = serialization.load_pem_private_key(key_pem, password=None)
        assert cert.public_key().public_numbers() == key.public_key().public_numbers()

    def test_loopback_names(self, cert_and_key):
        cert = x509.load_pem_x509_certificate(cert_and_key[0])
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
        addresses = san.get_values_for_type(x509.IPAddress)
        assert ipaddress.ip_address("127.0.0.1") in addresses
        assert ipaddress.ip_address("::1") in addresses
        assert "localhost" in san.get_values_for_type(x509.DNSName)

    def test_usable_for_both_ends(self, cert_and_key):
        """The certificate authenticates the server and the client, and signs as CA."""
        cert = x509.load_pem_x509_certificate(cert_and_key[0])
        usages = cert.extensions.get_extension_for_class(x509.ExtendedKeyUsage).value
        assert ExtendedKeyUsageOID.SERVER_AUTH in usages
        assert ExtendedKeyUsageOID.CLIENT_AUTH in usages
        assert cert.extensions.get_extension_for_class(x509.BasicConstraints).value.ca

    def test_self_signed(self, cert_and_key):
        cert = x509.load_pem_x509_certificate(cert_and_key[0])
        assert cert.issuer == cert.subject


class TestEnsureCertificates:
    def test_generates_missing_files(self, tmp_path):
        cert_path = tmp_path / "certs" / "public.pem"
        key_path = tmp_path / "certs" / "private.pem"

        assert ensure_certificates(cert_path, key_path, key_size=TEST_KEY_SIZE) is True
        assert cert_path.exists()
        assert stat.S_IMODE(key_path.stat().st_mode) == 0o600

    def test_keeps_existing_files(self, tmp_path):
        cert_path = tmp_path / "public.pem"
        key_path = tmp_path / "private.pem"
        cert_path.write_bytes(b"cert")
        key_path.write_bytes(b"key")

        assert ensure_certificates(cert_path, key_path, key_size=TEST_KEY_SIZE) is False
        assert cert_path.read_bytes() == b"cert"

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(CertificateError):
            ensure_certificates(
                blocker / "public.pem", blocker / "private.pem", key_size=TEST_KEY_SIZE
            )
