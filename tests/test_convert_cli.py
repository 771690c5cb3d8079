import json

from tools.convert_model import main


def test_cli_converts_in_place(model_file, capsys):
    assert main(["--model", str(model_file)]) == 0

    out = capsys.readouterr().out
    assert "Converted 4 of 4 layers" in out
    assert "Has batch_input_shape: True" in out

    layers = json.loads(model_file.read_text())["modelTopology"]["model_config"]["config"]["layers"]
    assert layers[0]["config"]["batch_input_shape"] == [None, 224, 224, 3]
    assert model_file.with_name("model_original.json").exists()


def test_cli_custom_backup_and_dry_run(model_file, tmp_path, capsys):
    backup = tmp_path / "keras3.json"
    before = model_file.read_text()

    assert main(["--model", str(model_file), "--backup", str(backup), "--dry-run"]) == 0
    assert "Dry run: 4 layers would change" in capsys.readouterr().out
    assert model_file.read_text() == before
    assert not backup.exists()


def test_cli_missing_model(tmp_path, capsys):
    assert main(["--model", str(tmp_path / "nope.json")]) == 1
    assert "Error converting model" in capsys.readouterr().err


def test_cli_conversion_guide(tmp_path, capsys):
    assert main(["--model", str(tmp_path / "web" / "model.json"), "--help-convert"]) == 0
    out = capsys.readouterr().out
    assert "tensorflowjs_converter" in out
    assert str(tmp_path / "web") in out


def test_cli_undecodable_model(tmp_path, capsys):
    path = tmp_path / "model.json"
    path.write_bytes(b"\x89PNG\r\n\x1a\n\xff\xff")
    assert main(["--model", str(path), "--no-backup"]) == 1
    assert "Error converting model" in capsys.readouterr().err
