import io
import sys

import pytest

import ethutils

SAMPLE = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
SAMPLE_PLAIN = "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"


def run(capsys, *argv):
    code = ethutils.main(list(argv))
    out, err = capsys.readouterr()
    return code, out, err


def test_convert_to_plain(capsys):
    code, out, err = run(capsys, "address", "-c", "plain", SAMPLE)
    assert code == 0
    assert out == SAMPLE_PLAIN + "\n"
    assert err == ""


def test_convert_defaults_to_checksum(capsys):
    code, out, _ = run(capsys, "address", SAMPLE_PLAIN)
    assert code == 0
    assert out == SAMPLE + "\n"


def test_long_options(capsys):
    code, out, _ = run(capsys, "address", "--convert", "checksum", SAMPLE_PLAIN)
    assert code == 0
    assert out.strip() == SAMPLE


def test_tolerate_decimal(capsys):
    value = str(int(SAMPLE_PLAIN, 16) + (3 << 160))
    code, out, _ = run(capsys, "address", "-t", value)
    assert code == 0
    assert out.strip() == SAMPLE


def test_tolerate_plain(capsys):
    code, out, _ = run(capsys, "address", "--tolerate", "--convert", "plain", "255")
    assert code == 0
    assert out.strip() == "0x" + "0" * 38 + "ff"


def test_invalid_address(capsys):
    code, out, err = run(capsys, "address", "zz")
    assert code == 1
    assert out == ""
    assert "Invalid address" in err


def test_invalid_integer(capsys):
    code, out, err = run(capsys, "address", "-t", "not-a-number")
    assert code == 1
    assert out == ""
    assert err.startswith("Invalid address: invalid digit")


def test_tolerate_oversized_literal(capsys):
    code, out, err = run(capsys, "address", "-t", "9" * 5000)
    assert code == 1
    assert out == ""
    assert err.startswith("Invalid address: number too large")


def test_tolerate_zero_padded_literal(capsys):
    code, out, _ = run(capsys, "address", "-t", "-c", "plain", "0" * 5000 + "1")
    assert code == 0
    assert out.strip() == "0x" + "0" * 39 + "1"


def test_tolerate_rejects_hex(capsys):
    code, _, err = run(capsys, "address", "-t", SAMPLE)
    assert code == 1
    assert "Invalid address" in err


def test_verify_checksum(capsys):
    code, _, err = run(capsys, "address", "--verify-checksum", SAMPLE[:-1] + "D")
    assert code == 1
    assert "bad checksum" in err

    code, out, _ = run(capsys, "address", "--verify-checksum", SAMPLE)
    assert code == 0
    assert out.strip() == SAMPLE


def test_bad_format_is_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        ethutils.main(["address", "-c", "bech32", SAMPLE])
    assert exc.value.code == 2


def test_missing_address_is_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        ethutils.main(["address"])
    assert exc.value.code == 2


def test_keccak_reads_stdin(capsys, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"abc")))
    code, out, _ = run(capsys, "keccak")
    assert code == 0
    assert out.strip() == "4e03657aea45a94fc7d47ba826c8d667c0d1e6e33a64a036ec44f58fa12d6c45"


def test_self_test(capsys):
    code, out, _ = run(capsys, "self-test")
    assert code == 0
    assert out == "ok\n"


def test_self_test_failure(capsys, monkeypatch):
    def broken():
        raise RuntimeError("Keccak-256 self-test failed for empty")

    monkeypatch.setattr(ethutils, "run_self_test", broken)
    code, out, err = run(capsys, "self-test")
    assert code == 1
    assert out == ""
    assert "self-test failed" in err
