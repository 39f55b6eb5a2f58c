"""Tests for the cookie field orchestrator."""
import hashlib
import logging
import threading

from authcookie.adapters.aesgcm_cipher import AesGcmCipher
from authcookie.domain.cache import DecodeCache
from authcookie.domain.codec import FieldCodec, b64u_decode, b64u_encode
from authcookie.domain.keys import KeyRing
from authcookie.domain.orchestrator import CookieFieldOrchestrator
from authcookie.settings import FailurePolicy
from conftest import UnavailableCipher

COOKIE_FIELDS = ["alice", "1700000000", "tok123", "hmacabc"]


def _tamper(field: str) -> str:
    payload = bytearray(b64u_decode(field[1:]))
    payload[-1] ^= 0x01
    return field[0] + b64u_encode(bytes(payload))


def test_concrete_scenario(orchestrator, keys):
    assert keys.primary == hashlib.sha256(b"mysecret").digest()

    encrypted = orchestrator.encrypt_field(COOKIE_FIELDS)
    assert encrypted[0].startswith(":")
    assert encrypted[1:] == COOKIE_FIELDS[1:]
    assert COOKIE_FIELDS[0] == "alice"  # input is not mutated

    assert orchestrator.decrypt_username(encrypted[0]) == "alice"
    assert orchestrator.decrypt_username("alice") == "alice"


def test_plaintext_pass_through(orchestrator, cipher):
    for username in ["alice", "", "bob:smith", " :leading-space"]:
        assert orchestrator.decrypt_username(username) == username

    assert cipher.open_calls == 0
    assert len(orchestrator.cache) == 0


def test_cache_skips_second_decrypt(orchestrator, cipher):
    field = orchestrator.encrypt_field(COOKIE_FIELDS)[0]

    assert orchestrator.decrypt_username(field) == "alice"
    assert cipher.open_calls == 1

    assert orchestrator.decrypt_username(field) == "alice"
    assert cipher.open_calls == 1
    assert field in orchestrator.cache


def test_failed_decode_returns_raw_and_is_not_cached(orchestrator, cipher):
    field = _tamper(orchestrator.encrypt_field(COOKIE_FIELDS)[0])

    assert orchestrator.decrypt_username(field) == field
    assert orchestrator.decrypt_username(field) == field
    assert cipher.open_calls == 2
    assert len(orchestrator.cache) == 0


def test_malformed_field_returns_raw(orchestrator):
    assert orchestrator.decrypt_username(":not valid base64") == ":not valid base64"
    assert orchestrator.decrypt_username(":") == ":"


def test_reject_policy(codec, keys):
    orchestrator = CookieFieldOrchestrator(codec=codec, keys=keys, on_failure=FailurePolicy.REJECT)
    field = orchestrator.encrypt_field(COOKIE_FIELDS)[0]

    assert orchestrator.decrypt_username(field) == "alice"
    assert orchestrator.decrypt_username(_tamper(field)) is None
    assert orchestrator.decrypt_username(":garbage") is None
    # Plaintext is still accepted during rollout
    assert orchestrator.decrypt_username("alice") == "alice"


def test_encrypt_failure_fails_open(codec, keys, no_entropy, caplog):
    orchestrator = CookieFieldOrchestrator(codec=codec, keys=keys)

    with caplog.at_level(logging.ERROR, logger="authcookie"):
        assert orchestrator.encrypt_field(COOKIE_FIELDS) == COOKIE_FIELDS

    assert "UNAVAILABLE" in caplog.text
    assert "alice" not in caplog.text


def test_encrypt_failure_rejected(codec, keys, no_entropy):
    orchestrator = CookieFieldOrchestrator(
        codec=codec,
        keys=keys,
        on_failure=FailurePolicy.REJECT,
    )
    assert orchestrator.encrypt_field(COOKIE_FIELDS) is None


def test_no_keys_disables_encryption(codec):
    orchestrator = CookieFieldOrchestrator(codec=codec, keys=None, on_failure=FailurePolicy.REJECT)

    assert not orchestrator.encryption_enabled
    assert orchestrator.encrypt_field(COOKIE_FIELDS) == COOKIE_FIELDS
    assert orchestrator.decrypt_username(":looks-encrypted") == ":looks-encrypted"


def test_empty_fields(orchestrator):
    assert orchestrator.encrypt_field([]) == []


def test_key_rollover():
    codec = FieldCodec(AesGcmCipher())
    old = CookieFieldOrchestrator(codec=codec, keys=KeyRing.from_secrets("old-secret"))
    field = old.encrypt_field(COOKIE_FIELDS)[0]

    rotated = CookieFieldOrchestrator(codec=codec, keys=KeyRing.from_secrets("new-secret", ["old-secret"]))
    assert rotated.decrypt_username(field) == "alice"

    # New cookies use the new primary key only
    new_field = rotated.encrypt_field(COOKIE_FIELDS)[0]
    assert old.decrypt_username(new_field) == new_field

    dropped = CookieFieldOrchestrator(codec=codec, keys=KeyRing.from_secrets("new-secret"))
    assert dropped.decrypt_username(field) == field


def test_shared_cache_concurrent_access(codec, keys):
    orchestrator = CookieFieldOrchestrator(codec=codec, keys=keys, cache=DecodeCache())
    fields = [orchestrator.encrypt_field([f"user{i}", "1", "t", "h"])[0] for i in range(10)]
    errors = []

    def worker():
        for _ in range(20):
            for i, field in enumerate(fields):
                if orchestrator.decrypt_username(field) != f"user{i}":
                    errors.append(field)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(orchestrator.cache) == 10


def test_unavailable_cipher_passes_through_under_reject(keys):
    orchestrator = CookieFieldOrchestrator(
        codec=FieldCodec(UnavailableCipher()),
        keys=keys,
        on_failure=FailurePolicy.REJECT,
    )

    assert not orchestrator.encryption_enabled
    assert orchestrator.encrypt_field(COOKIE_FIELDS) == COOKIE_FIELDS
    assert orchestrator.decrypt_username(":looks-encrypted") == ":looks-encrypted"


def test_whitespace_variants_are_not_decoded_or_cached(orchestrator, cipher):
    field = orchestrator.encrypt_field(COOKIE_FIELDS)[0]

    assert orchestrator.decrypt_username(field + "\n") == field + "\n"
    assert orchestrator.decrypt_username(field) == "alice"
    assert len(orchestrator.cache) == 1
    assert field + "\n" not in orchestrator.cache


def test_decode_failure_tries_every_key(cipher):
    codec = FieldCodec(cipher)
    orchestrator = CookieFieldOrchestrator(
        codec=codec,
        keys=KeyRing.from_secrets("new-secret", ["old-1", "old-2"]),
    )

    tampered = _tamper(orchestrator.encrypt_field(COOKIE_FIELDS)[0])

    assert orchestrator.decrypt_username(":garbage!") == ":garbage!"
    assert orchestrator.decrypt_username(tampered) == tampered
    # Malformed input never reaches the cipher; tampered input is tried against all three keys
    assert cipher.open_calls == 3
