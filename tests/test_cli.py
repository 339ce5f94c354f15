import json

import pytest

from vinscan.api import cli
from vinscan.core.adapter import VehicleAIAdapter

from stub_oracle import StubOracle


@pytest.fixture
def stub_adapter(config):
    oracle = StubOracle()
    return VehicleAIAdapter(config, oracle=oracle), oracle


def test_decode_prints_json(stub_adapter, capsys):
    adapter, oracle = stub_adapter
    oracle.text = json.dumps({"brand": "Dacia", "model": "Sandero"})

    assert cli.main(["decode", "UU1B5220123456789"], adapter=adapter) == 0

    assert json.loads(capsys.readouterr().out) == {"brand": "Dacia", "model": "Sandero"}


def test_scan_loads_image_file(stub_adapter, tmp_path, png_bytes, capsys):
    adapter, oracle = stub_adapter
    oracle.text = json.dumps({"vin": "uu1-b52", "brand": "dacia", "model": "logan"})
    path = tmp_path / "vin.png"
    path.write_bytes(png_bytes)

    assert cli.main(["scan", str(path), "--mode", "carte grise"], adapter=adapter) == 0

    assert json.loads(capsys.readouterr().out)["vin"] == "UU1B52"
    assert oracle.last.image.mime_type == "image/png"


def test_estimate_failure_returns_exit_code_1(stub_adapter, capsys):
    adapter, _ = stub_adapter
    code = cli.main(["estimate", "--brand", "KIA", "--model", "PICANTO"], adapter=adapter)
    assert code == 1
    assert "IA_ESTIMATION_FAILED" in capsys.readouterr().err


def test_report_prints_text(stub_adapter, capsys):
    adapter, oracle = stub_adapter
    oracle.text = "### 1. Identité"
    cli.main(["report", "WVWZZZ1KZAW000001"], adapter=adapter)
    assert "### 1. Identité" in capsys.readouterr().out


def test_chat_loop_records_history_and_handles_commands(stub_adapter, capsys):
    adapter, oracle = stub_adapter
    oracle.text = "Réponse"
    inputs = iter(["Bonjour", "", "clear", "Question ?", "exit"])

    history = cli.run_chat(adapter, read=lambda prompt: next(inputs))

    assert len(oracle.requests) == 2
    assert oracle.requests[1].history == ()
    assert [t.text for t in history] == ["Question ?", "Réponse"]


def test_chat_loop_stops_on_eof(stub_adapter):
    adapter, oracle = stub_adapter

    def read(prompt):
        raise EOFError

    history = cli.run_chat(adapter, read=read)
    assert len(history) == 0
    assert oracle.requests == []
