# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# tests/test_cli.py

import json

import pytest

from zkattest import __main__ as cli
from zkattest.files import save_json


@pytest.fixture(autouse=True)
def quiet(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda level: None)
    monkeypatch.setattr(cli, "load_dotenv", lambda: False)


@pytest.fixture
def bundle(tmp_path, synthetic_hash_proof):
    save_json(tmp_path / "proof.json", synthetic_hash_proof.proof.to_snarkjs())
    save_json(tmp_path / "public.json", [str(s) for s in synthetic_hash_proof.public_signals])
    return tmp_path


def test_interpret(bundle, capsys):
    assert cli.main(["interpret", "hash", "--public", str(bundle / "public.json")]) == 0
    assert capsys.readouterr().out.startswith("1 MATCH")


def test_unknown_code_is_configuration_error(tmp_path, capsys):
    save_json(tmp_path / "public.json", ["9"])
    assert cli.main(["interpret", "hash", "--public", str(tmp_path / "public.json")]) == 2
    assert "unknown result code 9" in capsys.readouterr().err


def test_verify(bundle, circuits_dir, monkeypatch, capsys):
    monkeypatch.setenv("ZK_CIRCUITS_DIR", str(circuits_dir))
    args = ["verify", "hash-verifier", "--proof", str(bundle / "proof.json"), "--public", str(bundle / "public.json")]

    assert cli.main(args) == 0
    assert capsys.readouterr().out.strip() == "valid"


def test_verify_tampered(bundle, circuits_dir, monkeypatch, capsys):
    monkeypatch.setenv("ZK_CIRCUITS_DIR", str(circuits_dir))
    save_json(bundle / "public.json", ["3", "0", "0"])
    args = ["verify", "hash", "--proof", str(bundle / "proof.json"), "--public", str(bundle / "public.json")]

    assert cli.main(args) == 1
    assert capsys.readouterr().out.strip() == "invalid"


def test_calldata_json(bundle, capsys):
    args = ["calldata", "age", "--proof", str(bundle / "proof.json"), "--public", str(bundle / "public.json"), "--json"]

    assert cli.main(args) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["circuit"] == "AgeVerifier"
    assert len(data["input"]) == 4


def test_calldata_strict(bundle, capsys):
    args = ["calldata", "age", "--proof", str(bundle / "proof.json"), "--public", str(bundle / "public.json"), "--strict"]

    assert cli.main(args) == 2
    assert "length mismatch" in capsys.readouterr().err


def test_hash_zero_cannot_be_proven(capsys):
    assert cli.main(["hash", "123456", "0", "111111", "999999"]) == 1
    assert "cannot be proven" in capsys.readouterr().err


def test_resolve_missing(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("ZK_CIRCUITS_DIR", str(tmp_path))
    assert cli.main(["resolve", "fhir"]) == 2
    assert "FhirVerifier" in capsys.readouterr().err


def test_resolve_missing_vkey_honours_require_zkey(tmp_path, monkeypatch, capsys):
    d = tmp_path / "fhir-verifier"
    d.mkdir()
    (d / "FhirVerifier.wasm").write_text("wasm")
    (d / "FhirVerifier_0001.zkey").write_text("zkey")
    monkeypatch.setenv("ZK_CIRCUITS_DIR", str(tmp_path))

    monkeypatch.setenv("REQUIRE_ZKEY", "0")
    assert cli.main(["resolve", "fhir"]) == 0
    assert "vkey: <missing>" in capsys.readouterr().out

    monkeypatch.setenv("REQUIRE_ZKEY", "1")
    assert cli.main(["resolve", "fhir"]) == 2


class TestConfigurationErrors:
    """Broken keys, files and environment exit 2, not 1."""

    def test_foreign_verification_key(self, bundle, circuits_dir, monkeypatch, capsys):
        save_json(circuits_dir / "hash-verifier" / "verification_key_HashVerifier.json", {"protocol": "plonk"})
        monkeypatch.setenv("ZK_CIRCUITS_DIR", str(circuits_dir))
        args = ["verify", "hash", "--proof", str(bundle / "proof.json"), "--public", str(bundle / "public.json")]

        assert cli.main(args) == 2
        err = capsys.readouterr().err
        assert "configuration error" in err
        assert "plonk" in err

    def test_bad_prover_timeout(self, bundle, monkeypatch, capsys):
        monkeypatch.setenv("ZK_PROVER_TIMEOUT", "soon")

        assert cli.main(["interpret", "hash", "--public", str(bundle / "public.json")]) == 2
        assert "ZK_PROVER_TIMEOUT" in capsys.readouterr().err

    def test_missing_proof_file(self, bundle, capsys):
        args = ["calldata", "hash", "--proof", str(bundle / "nope.json"), "--public", str(bundle / "public.json")]

        assert cli.main(args) == 2
        assert "configuration error" in capsys.readouterr().err

    def test_invalid_json(self, bundle, capsys):
        (bundle / "public.json").write_text("[1, 2,")

        assert cli.main(["interpret", "hash", "--public", str(bundle / "public.json")]) == 2
        assert "configuration error" in capsys.readouterr().err


if __name__ == "__main__":
    pytest.main()
