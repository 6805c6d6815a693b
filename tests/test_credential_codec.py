"""Tests for the credential codec."""

import pytest

from site_deploy.constants import SECRET_MASK
from site_deploy.core.credential_codec import CredentialCodec


class TestEncryptDecrypt:
    """Test single value obfuscation."""

    def test_round_trip_preserves_unicode(self):
        codec = CredentialCodec()
        secret = "pässwörd-🔑"
        assert codec.decrypt(codec.encrypt(secret)) == secret

    def test_encoded_value_differs_from_plain(self):
        codec = CredentialCodec()
        assert codec.encrypt("hunter2") != "hunter2"

    def test_empty_string(self):
        codec = CredentialCodec()
        assert codec.decrypt(codec.encrypt("")) == ""

    def test_different_keys_do_not_interoperate(self):
        encoded = CredentialCodec(key="one").encrypt("secret")
        decoded = CredentialCodec(key="two").decrypt(encoded)
        assert decoded != "secret"

    def test_invalid_base64_raises_value_error(self):
        with pytest.raises(ValueError):
            CredentialCodec().decrypt("not base64!!")

    def test_empty_key_rejected(self):
        with pytest.raises(ValueError):
            CredentialCodec(key="")


class TestConfigHelpers:
    """Test whole-config encoding and masking."""

    def test_encrypt_config_marks_sensitive_keys(self):
        codec = CredentialCodec()
        stored = codec.encrypt_config({"host": "example.com", "password": "pw", "token": "t"})

        assert stored["host"] == "example.com"
        assert stored["password"] != "pw"
        assert stored["password_encrypted"] is True
        assert stored["token_encrypted"] is True

    def test_encrypt_config_skips_empty_and_non_string(self):
        codec = CredentialCodec()
        stored = codec.encrypt_config({"password": "", "token": None})

        assert stored == {"password": "", "token": None}

    def test_encrypt_config_does_not_double_encode(self):
        codec = CredentialCodec()
        once = codec.encrypt_config({"token": "abc"})
        twice = codec.encrypt_config(once)

        assert twice == once

    def test_decrypt_config_restores_values_and_drops_markers(self):
        codec = CredentialCodec()
        original = {"host": "h", "password": "pw", "api_token": "cf"}

        assert codec.decrypt_config(codec.encrypt_config(original)) == original

    def test_decrypt_config_leaves_unmarked_values(self):
        codec = CredentialCodec()
        assert codec.decrypt_config({"token": "plain"}) == {"token": "plain"}

    def test_encrypt_config_does_not_mutate_input(self):
        codec = CredentialCodec()
        config = {"token": "abc"}
        codec.encrypt_config(config)
        assert config == {"token": "abc"}

    def test_mask_config(self):
        codec = CredentialCodec()
        masked = codec.mask_config(codec.encrypt_config({"username": "me", "password": "pw"}))

        assert masked == {"username": "me", "password": SECRET_MASK}

    def test_mask_config_keeps_empty_secrets(self):
        codec = CredentialCodec()
        assert codec.mask_config({"token": ""}) == {"token": ""}

    def test_custom_sensitive_keys(self):
        codec = CredentialCodec(sensitive_keys=["secret"])

        assert codec.is_sensitive("secret")
        assert not codec.is_sensitive("password")
