"""
Unit tests for the credential codec.

Covers the structured scrypt record, the legacy plaintext fallback and
the handling of corrupt records.
"""

import base64
import json
import statistics
import time

import pytest

from app.core.security import (
    CredentialCodec,
    LegacyPlaintext,
    ScryptParams,
    StructuredRecord,
    parse_credential_record,
    serialize_credential_record,
)


def _encode(payload: dict) -> str:
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


@pytest.mark.unit
class TestHashAndVerify:
    """Structured record round trip."""

    @pytest.mark.parametrize("secret", ["secret123", "", "비밀번호", "a" * 500, "with spaces and \n newline"])
    def test_verify_accepts_original_secret(self, fast_codec, secret):
        record = fast_codec.hash(secret)
        assert fast_codec.verify(record, secret) is True

    def test_verify_rejects_other_secret(self, fast_codec):
        record = fast_codec.hash("secret123")

        assert fast_codec.verify(record, "secret124") is False
        assert fast_codec.verify(record, "Secret123") is False
        assert fast_codec.verify(record, "") is False

    def test_same_secret_produces_different_records(self, fast_codec):
        """Fresh salt on every call."""
        first = fast_codec.hash("secret123")
        second = fast_codec.hash("secret123")

        assert first != second
        assert parse_credential_record(first).salt != parse_credential_record(second).salt
        assert fast_codec.verify(first, "secret123")
        assert fast_codec.verify(second, "secret123")

    def test_record_is_self_describing(self, fast_codec):
        record = fast_codec.hash("secret123")
        payload = json.loads(base64.b64decode(record))

        assert record.startswith("ey")
        assert "secret123" not in record
        assert set(payload) == {"salt", "hash", "params"}
        assert payload["params"] == {"n": 1024, "r": 8, "p": 1, "keylen": 64}
        assert len(base64.b64decode(payload["hash"])) == 64
        assert len(base64.b64decode(payload["salt"])) == 16

    def test_default_parameters_match_reference_point(self):
        codec = CredentialCodec()
        assert codec.params == ScryptParams(n=32768, r=8, p=1, keylen=64)

    def test_old_records_verify_after_defaults_change(self, fast_codec):
        """Cost parameters come from the record, not the codec."""
        record = fast_codec.hash("secret123")
        stronger = CredentialCodec(params=ScryptParams(n=2048, r=8, p=2, keylen=32))

        assert stronger.verify(record, "secret123") is True
        assert stronger.verify(record, "wrong") is False

    def test_default_codec_round_trip(self):
        codec = CredentialCodec()
        record = codec.hash("secret123")

        assert codec.verify(record, "secret123") is True
        assert codec.verify(record, "wrong") is False

    def test_out_of_range_codec_parameters_rejected(self):
        with pytest.raises(ValueError):
            CredentialCodec(params=ScryptParams(n=1000))


@pytest.mark.unit
class TestLegacyPlaintext:
    """Records created before the structured format existed."""

    def test_plaintext_record_matches_equal_secret(self, fast_codec):
        assert fast_codec.verify("hunter2", "hunter2") is True

    def test_plaintext_record_rejects_other_secret(self, fast_codec):
        assert fast_codec.verify("hunter2", "hunter2x") is False
        assert fast_codec.verify("hunter2", "hunter") is False

    def test_plaintext_is_parsed_as_legacy(self):
        assert parse_credential_record("hunter2") == LegacyPlaintext("hunter2")

    def test_base64_that_is_not_a_record_is_legacy(self):
        not_a_record = _encode({"foo": "bar"})
        assert parse_credential_record(not_a_record) == LegacyPlaintext(not_a_record)


@pytest.mark.unit
class TestCorruptRecords:
    """Corruption and wrong password must look the same: False, never an error."""

    def test_truncated_record_does_not_match(self, fast_codec):
        record = fast_codec.hash("secret123")
        truncated = record[: len(record) // 2]

        assert fast_codec.verify(truncated, "secret123") is False

    def test_tampered_key_does_not_match(self, fast_codec):
        record = fast_codec.hash("secret123")
        payload = json.loads(base64.b64decode(record))
        payload["hash"] = base64.b64encode(b"\x00" * 64).decode("ascii")

        assert fast_codec.verify(_encode(payload), "secret123") is False

    def test_short_key_does_not_match(self, fast_codec):
        record = fast_codec.hash("secret123")
        payload = json.loads(base64.b64decode(record))
        payload["hash"] = base64.b64encode(base64.b64decode(payload["hash"])[:10]).decode("ascii")

        assert fast_codec.verify(_encode(payload), "secret123") is False

    @pytest.mark.parametrize("params", [
        {"n": 1000, "r": 8, "p": 1, "keylen": 64},          # not a power of two
        {"n": 2 ** 30, "r": 8, "p": 1, "keylen": 64},       # memory bomb
        {"n": 1024, "r": 0, "p": 1, "keylen": 64},
        {"n": 1024, "r": 8, "p": 1000, "keylen": 64},
        {"n": 1024, "r": 8, "p": 1, "keylen": 0},
    ])
    def test_bad_parameters_do_not_match(self, fast_codec, params):
        payload = {
            "salt": base64.b64encode(b"s" * 16).decode("ascii"),
            "hash": base64.b64encode(b"k" * 64).decode("ascii"),
            "params": params,
        }
        record = _encode(payload)

        assert isinstance(parse_credential_record(record), StructuredRecord)
        assert fast_codec.verify(record, "anything") is False

    @pytest.mark.parametrize("n", [float("inf"), float("-inf"), 1e999])
    def test_infinite_parameters_do_not_match(self, fast_codec, n):
        payload = {
            "salt": base64.b64encode(b"s" * 16).decode("ascii"),
            "hash": base64.b64encode(b"k" * 64).decode("ascii"),
            "params": {"n": n, "r": 8, "p": 1, "keylen": 64},
        }
        record = _encode(payload)

        assert isinstance(parse_credential_record(record), LegacyPlaintext)
        assert fast_codec.verify(record, "anything") is False

    def test_deeply_nested_payload_does_not_match(self, fast_codec):
        nested = "[" * 100_000 + "]" * 100_000
        record = base64.b64encode(nested.encode("ascii")).decode("ascii")

        assert fast_codec.verify(record, "anything") is False

    def test_invalid_salt_encoding_falls_back_to_legacy(self, fast_codec):
        payload = {
            "salt": "***",
            "hash": base64.b64encode(b"k" * 64).decode("ascii"),
            "params": {"n": 1024, "r": 8, "p": 1, "keylen": 64},
        }
        record = _encode(payload)

        assert isinstance(parse_credential_record(record), LegacyPlaintext)
        assert fast_codec.verify(record, "anything") is False


@pytest.mark.unit
def test_serialize_parse_preserves_fields():
    original = StructuredRecord(salt=b"0123456789abcdef", key=b"k" * 64, params=ScryptParams(n=2048, r=4, p=2, keylen=64))

    assert parse_credential_record(serialize_credential_record(original)) == original


@pytest.mark.unit
@pytest.mark.slow
def test_verify_time_does_not_depend_on_guess():
    """Correct and incorrect guesses of the same length take the same time."""
    codec = CredentialCodec(params=ScryptParams(n=4096, r=8, p=1, keylen=64))
    record = codec.hash("correct-horse")
    right, wrong = [], []

    for _ in range(15):
        for guess, samples in (("correct-horse", right), ("correct-horsf", wrong)):
            start = time.perf_counter()
            codec.verify(record, guess)
            samples.append(time.perf_counter() - start)

    right_median = statistics.median(right)
    wrong_median = statistics.median(wrong)

    assert abs(right_median - wrong_median) < 0.25 * max(right_median, wrong_median)
