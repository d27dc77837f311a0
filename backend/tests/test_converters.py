"""Unit tests for filter value convertors and Fernet helpers."""

import unittest
from datetime import datetime, timedelta, timezone

from cryptography.fernet import Fernet

from gridquery.crypto import DecryptionError, fernet_decryptor, fernet_encryptor
from gridquery.exceptions import InvalidQueryError
from gridquery.mapping import to_utc_datetime


class ToUtcDateTimeTests(unittest.TestCase):
    def test_offsets_are_normalized_to_utc(self) -> None:
        value = to_utc_datetime("2024-05-01T12:30:00+04:00")

        self.assertEqual(value, datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc))
        self.assertEqual(value.utcoffset(), timedelta(0))

    def test_zulu_suffix(self) -> None:
        self.assertEqual(to_utc_datetime("2024-05-01T00:00:00Z"), datetime(2024, 5, 1, tzinfo=timezone.utc))

    def test_naive_values_get_utc_tzinfo(self) -> None:
        self.assertIs(to_utc_datetime("2024-05-01").tzinfo, timezone.utc)

    def test_invalid_text(self) -> None:
        with self.assertRaises(InvalidQueryError):
            to_utc_datetime("first of may")


class FernetHelperTests(unittest.TestCase):
    def test_round_trip_and_wrong_key(self) -> None:
        key = Fernet.generate_key()
        token = fernet_encryptor(key)("GE-0042")

        self.assertIsInstance(token, bytes)
        self.assertEqual(fernet_decryptor(key)(token), "GE-0042")
        with self.assertRaises(DecryptionError):
            fernet_decryptor(Fernet.generate_key())(token)


if __name__ == "__main__":
    unittest.main()
