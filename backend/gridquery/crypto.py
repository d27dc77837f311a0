"""Fernet helpers producing the encrypt/decrypt callables used for encrypted columns."""

from collections.abc import Callable

from cryptography.fernet import Fernet, InvalidToken

from gridquery.exceptions import GridQueryError


class DecryptionError(GridQueryError):
    """Stored ciphertext could not be decrypted with the configured key."""


def fernet_encryptor(key: str | bytes) -> Callable[[str], bytes]:
    fernet = Fernet(key)
    return lambda plain: fernet.encrypt(plain.encode("utf-8"))


def fernet_decryptor(key: str | bytes) -> Callable[[bytes], str]:
    fernet = Fernet(key)

    def decrypt(raw: bytes) -> str:
        try:
            return fernet.decrypt(raw).decode("utf-8")
        except InvalidToken as exc:
            raise DecryptionError("Encrypted value does not match the configured key.") from exc

    return decrypt
