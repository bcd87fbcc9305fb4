import json

import pytest

from jsonsplice import cli
from jsonsplice.tools import edit

DOC = '{\n  "name": "demo",\n  "version": "1.0.0",\n  "tags": ["a", "b"]\n}\n'


@pytest.fixture
def doc_path(tmp_path):
    p = tmp_path / "doc.json"
    p.write_text(DOC, encoding="utf-8")
    return p


def test_edit_in_place(doc_path):
    rc = cli.main(["edit", str(doc_path), "--path", '["version"]', "--value", "2.0.0", "--in-place"])
    assert rc == 0
    assert doc_path.read_text(encoding="utf-8") == DOC.replace("1.0.0", "2.0.0")


def test_edit_to_stdout(doc_path, capsys):
    rc = cli.main(["edit", str(doc_path), "--path", '["tags", 2]', "--value", "c"])
    assert rc == 0
    assert capsys.readouterr().out == DOC.replace('["a", "b"]', '["a", "b", "c"]')
    assert doc_path.read_text(encoding="utf-8") == DOC


def test_edit_to_out_file(doc_path, tmp_path):
    out = tmp_path / "out.json"
    rc = cli.main(["edit", str(doc_path), "--pointer", "/tags/0", "--value", "z", "--out", str(out)])
    assert rc == 0
    assert json.loads(out.read_text(encoding="utf-8"))["tags"] == ["z", "b"]


def test_root_edit_keeps_trailing_newline(doc_path, capsys):
    rc = cli.main(["edit", str(doc_path), "--path", "[]", "--value", '{"a":1}'])
    assert rc == 0
    assert capsys.readouterr().out == '{\n  "a": 1\n}\n'


def test_edit_from_request_file(doc_path, tmp_path, capsys):
    req = tmp_path / "req.json"
    req.write_text(json.dumps({"path": ["license"], "value": "MIT"}), encoding="utf-8")
    rc = cli.main(["edit", str(doc_path), "--request", str(req)])
    assert rc == 0
    assert json.loads(capsys.readouterr().out)["license"] == "MIT"


def test_request_missing_value_is_rejected(doc_path, capsys):
    rc = cli.main(["edit", str(doc_path), "--path", '["name"]'])
    assert rc == 2
    assert "'value' is a required property" in capsys.readouterr().err


def test_request_with_bad_segment_is_rejected(doc_path, capsys):
    rc = cli.main(["edit", str(doc_path), "--path", '["tags", -1]', "--value", "x"])
    assert rc == 2
    assert capsys.readouterr().err.startswith("/path/1:")


def test_unresolvable_path_falls_back(doc_path, capsys):
    rc = cli.main(["edit", str(doc_path), "--path", '["name", "x"]', "--value", "1"])
    assert rc == 0
    assert capsys.readouterr().out == DOC


def test_unresolvable_path_fails_in_strict_mode(doc_path, capsys):
    rc = cli.main(["edit", str(doc_path), "--path", '["name", "x"]', "--value", "1", "--strict"])
    assert rc == 2
    assert 'edit error at $["name"]["x"]' in capsys.readouterr().err


def test_json_edits_output(doc_path, capsys):
    rc = cli.main(["edit", str(doc_path), "--path", '["name"]', "--value", "other", "--json-edits"])
    assert rc == 0
    edits = json.loads(capsys.readouterr().out)
    assert edits == [
        {
            "offset": DOC.index('"demo"'),
            "length": 6,
            "content": '"other"',
            "range": {"start": {"line": 1, "character": 10}, "end": {"line": 1, "character": 16}},
        }
    ]


def test_tab_indentation_flag(tmp_path, capsys):
    p = tmp_path / "tabs.json"
    p.write_text('{\n\t"a": 1\n}', encoding="utf-8")
    rc = cli.main(["edit", str(p), "--path", '["b"]', "--value", "[1]", "--use-tabs"])
    assert rc == 0
    assert capsys.readouterr().out == '{\n\t"a": 1,\n\t"b": [\n\t\t1\n\t]\n}'


def test_missing_document(tmp_path, capsys):
    rc = cli.main(["edit", str(tmp_path / "nope.json"), "--path", "[]", "--value", "1"])
    assert rc == 3


def test_unparseable_path_argument(doc_path):
    assert cli.main(["edit", str(doc_path), "--path", "[oops", "--value", "1"]) == 3


def test_validate_request_reports_pointers():
    errors = edit.validate_request({"path": ["a", 1.5], "value": 3})
    pointers = [e["pointer"] for e in errors]
    assert "/path/1" in pointers
    assert "/value" in pointers


def test_request_with_path_and_pointer_is_rejected():
    assert edit.validate_request({"path": [], "pointer": "", "value": "x"})


def test_path_command(capsys):
    assert cli.main(["path", '["customer", 0, "name"]']) == 0
    assert capsys.readouterr().out == '$["customer"][0]["name"]\n'


def test_help_and_unknown_command(capsys):
    assert cli.main([]) == 0
    assert "Commands:" in capsys.readouterr().out
    assert cli.main(["frobnicate"]) == 2
    assert "Unknown command" in capsys.readouterr().err


def test_version(capsys):
    assert cli.main(["version"]) == 0
    assert capsys.readouterr().out.strip()


def test_schema_loads_from_package_directory():
    assert edit.SCHEMA_PATH.is_file()
    schema = edit.load_schema()
    assert schema["required"] == ["value"]


def test_node_command(tmp_path, capsys):
    rows = tmp_path / "rows.json"
    rows.write_text(json.dumps([{"key": "a", "value": 1, "type": "number"}, {"key": "b", "value": None, "type": "object"}]), encoding="utf-8")
    assert cli.main(["node", str(rows)]) == 0
    assert capsys.readouterr().out == '{\n  "a": 1\n}\n'


def test_node_command_single_scalar_row(tmp_path, capsys):
    rows = tmp_path / "rows.json"
    rows.write_text('[{"key": null, "value": "hi"}]', encoding="utf-8")
    assert cli.main(["node", str(rows)]) == 0
    assert capsys.readouterr().out == "hi\n"


def test_node_command_rejects_bad_rows(tmp_path, capsys):
    rows = tmp_path / "rows.json"
    rows.write_text("[1, 2", encoding="utf-8")
    assert cli.main(["node", str(rows)]) == 3
    rows.write_text('{"key": "a"}', encoding="utf-8")
    assert cli.main(["node", str(rows)]) == 2
    assert "array of objects" in capsys.readouterr().err
