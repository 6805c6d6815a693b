"""Reversible obfuscation of secret config values

Values are UTF-8 encoded, XOR-ed byte by byte with a fixed application key
and base64 encoded. This only keeps secrets from casual inspection of the
state files; it is not encryption in any cryptographic sense.
"""

import base64
import binascii
from typing import Any, Dict, Iterable, Optional

from ..constants import CREDENTIAL_KEY, ENCRYPTED_MARKER_SUFFIX, SECRET_MASK, SENSITIVE_KEYS


class CredentialCodec:
    """Encode, decode and mask sensitive config values"""

    def __init__(self, key: str = CREDENTIAL_KEY,
                 sensitive_keys: Optional[Iterable[str]] = None):
        if not key:
            raise ValueError("Credential key cannot be empty")
        self._key = key.encode("utf-8")
        self.sensitive_keys = list(sensitive_keys or SENSITIVE_KEYS)

    def _xor(self, data: bytes) -> bytes:
        key = self._key
        return bytes(b ^ key[i % len(key)] for i, b in enumerate(data))

    def encrypt(self, value: str) -> str:
        """Obfuscate a string value"""
        return base64.b64encode(self._xor(value.encode("utf-8"))).decode("ascii")

    def decrypt(self, value: str) -> str:
        """Reverse ``encrypt``

        Raises:
            ValueError: If the value is not a valid encoded secret
        """
        try:
            raw = base64.b64decode(value.encode("ascii"), validate=True)
            return self._xor(raw).decode("utf-8")
        except (binascii.Error, UnicodeError) as e:
            raise ValueError(f"Invalid encoded credential: {e}") from e

    def is_sensitive(self, key: str) -> bool:
        return key in self.sensitive_keys

    @staticmethod
    def marker_for(key: str) -> str:
        return f"{key}{ENCRYPTED_MARKER_SUFFIX}"

    def encrypt_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Copy of ``config`` with sensitive string values encoded

        Every encoded key gets a ``<key>_encrypted: true`` marker next to it.
        Values that are already marked are left alone.
        """
        result = dict(config)
        for key in self.sensitive_keys:
            value = result.get(key)
            if isinstance(value, str) and value and not result.get(self.marker_for(key)):
                result[key] = self.encrypt(value)
                result[self.marker_for(key)] = True
        return result

    def decrypt_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Copy of ``config`` with marked values decoded and markers removed"""
        result = dict(config)
        for key in self.sensitive_keys:
            marker = self.marker_for(key)
            if result.pop(marker, False) and isinstance(result.get(key), str):
                result[key] = self.decrypt(result[key])
        return result

    def mask_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Copy of ``config`` with sensitive values replaced by the mask token"""
        result = {}
        for key, value in config.items():
            if key.endswith(ENCRYPTED_MARKER_SUFFIX) and self.is_sensitive(key[:-len(ENCRYPTED_MARKER_SUFFIX)]):
                continue
            if self.is_sensitive(key) and value:
                result[key] = SECRET_MASK
            else:
                result[key] = value
        return result
