"""Tests for the command-line entry point (skill_tracker/main.py)"""
import json

from skill_tracker.main import build_parser, main


def run(capsys, tmp_path, *args):
    code = main(["--data-path", str(tmp_path), *args])
    return code, capsys.readouterr().out


def test_parser_requires_command():
    parser = build_parser()

    args = parser.parse_args(["export", "-o", "out.json"])

    assert args.command == "export"
    assert args.output == "out.json"


def test_status_seeds_defaults(capsys, tmp_path):
    code, out = run(capsys, tmp_path, "status")
    status = json.loads(out)

    assert code == 0
    assert [s["name"] for s in status["skills"]][0] == "Coding"
    assert status["morning_routine"]["total"] == 4
    assert status["latest_weight"] is None


def test_export_then_import(capsys, tmp_path):
    export_file = tmp_path / "export.json"
    code, _ = run(capsys, tmp_path / "a", "export", "-o", str(export_file))
    assert code == 0

    code, out = run(capsys, tmp_path / "b", "import", str(export_file))

    assert code == 0
    assert json.loads(out)["ok"] is True
    assert json.loads(out)["skills"] == 5
    assert (tmp_path / "b" / "skill_tracker.skills.json").exists()


def test_import_invalid_document(capsys, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")

    code, out = run(capsys, tmp_path / "data", "import", str(bad))
    result = json.loads(out)

    assert code == 1
    assert result["ok"] is False
    assert result["error"] == "FormatError"


def test_cleanup_weights_empty(capsys, tmp_path):
    code, out = run(capsys, tmp_path, "cleanup-weights")

    assert code == 0
    assert json.loads(out) == {"removed": 0, "remaining": 0}
