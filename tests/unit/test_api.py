"""Unit tests for the public scryptguard module surface."""

import threading

import pytest

import scryptguard
from scryptguard import ErrorKind, ScryptError
from scryptguard.primitive import resources

SMALL = dict(maxtime=0.05, maxmem=1 << 20)


@pytest.fixture(autouse=True)
def pinned_machine(monkeypatch):
    monkeypatch.setattr(resources, "cpu_ops_per_second", lambda window=None: 1e6)
    monkeypatch.setattr(resources, "memlimit_sys", lambda: 1 << 30)


def test_error_alias():
    assert scryptguard.error is ScryptError
    assert issubclass(scryptguard.error, Exception)


def test_roundtrip_bytes():
    ct = scryptguard.encrypt(b"message", b"password", **SMALL)
    assert len(ct) == len(b"message") + 128
    assert scryptguard.decrypt(ct, b"password") == b"message"


def test_text_arguments_are_utf8():
    ct = scryptguard.encrypt("héllo", "päss", **SMALL)
    assert scryptguard.decrypt(ct, "päss".encode("utf-8")) == "héllo".encode("utf-8")


def test_decrypt_with_encoding_returns_text():
    ct = scryptguard.encrypt("café", "pw", **SMALL)
    assert scryptguard.decrypt(ct, "pw", encoding="utf-8") == "café"


def test_decrypt_undecodable_plaintext():
    ct = scryptguard.encrypt(b"\xff\xfe\x00", "pw", **SMALL)
    with pytest.raises(UnicodeDecodeError):
        scryptguard.decrypt(ct, "pw", encoding="utf-8")


def test_bytes_like_inputs():
    ct = scryptguard.encrypt(bytearray(b"data"), memoryview(b"pw"), **SMALL)
    assert scryptguard.decrypt(bytearray(ct), b"pw") == b"data"


def test_wrong_password_via_module_error():
    ct = scryptguard.encrypt(b"data", b"right", **SMALL)
    with pytest.raises(scryptguard.error) as excinfo:
        scryptguard.decrypt(ct, b"wrong")
    assert excinfo.value.kind is ErrorKind.PASSWORD_INCORRECT


def test_rejects_non_bytes_input():
    with pytest.raises(TypeError):
        scryptguard.encrypt(12345, b"pw", **SMALL)
    with pytest.raises(TypeError):
        scryptguard.hash(b"pw", None)


def test_keyword_arguments():
    ct = scryptguard.encrypt(input=b"kw", password=b"pw", maxtime=0.05, maxmem=1 << 20, maxmemfrac=0.125)
    assert scryptguard.decrypt(input=ct, password=b"pw", maxtime=300.0, maxmem=0, maxmemfrac=0.5) == b"kw"


def test_hash_defaults_and_length():
    digest = scryptguard.hash("pleaseletmein", "SodiumChloride")
    assert len(digest) == 64
    assert digest.hex().startswith("7023bdcb3afd7348")


def test_hash_invalid_params():
    with pytest.raises(ScryptError) as excinfo:
        scryptguard.hash(b"pw", b"salt", N=3, r=1, p=1)
    assert excinfo.value.kind is ErrorKind.INVALID_PARAMS


def test_calls_are_independent_across_threads():
    results = {}

    def worker(i):
        password = f"pw-{i}".encode()
        ct = scryptguard.encrypt(f"msg-{i}".encode(), password, **SMALL)
        results[i] = scryptguard.decrypt(ct, password)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results == {i: f"msg-{i}".encode() for i in range(4)}


@pytest.mark.parametrize("budget", [{"maxtime": float("nan")}, {"maxmemfrac": float("nan")}])
def test_nan_budget_raises_scrypt_error(budget):
    with pytest.raises(ScryptError) as excinfo:
        scryptguard.encrypt(b"data", b"pw", **budget)
    assert excinfo.value.kind is ErrorKind.INVALID_PARAMS


def test_nan_budget_on_decrypt():
    ct = scryptguard.encrypt(b"data", b"pw", **SMALL)
    with pytest.raises(ScryptError) as excinfo:
        scryptguard.decrypt(ct, b"pw", maxmemfrac=float("nan"))
    assert excinfo.value.kind is ErrorKind.INVALID_PARAMS
