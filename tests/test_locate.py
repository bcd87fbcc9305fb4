import json

import pytest

from jsonsplice.tools.coerce import FormattingOptions
from jsonsplice.tools.errors import AddressError, DocumentParseError
from jsonsplice.tools.locate import resolve_edits
from jsonsplice.tools.splice import EditDescriptor, apply_edits

DOC = '{\n  "name": "demo",\n  "version": "1.0.0",\n  "tags": ["a", "b"]\n}\n'


def edit(text, path, value, options=None):
    return apply_edits(text, resolve_edits(text, path, value, options))


def test_existing_node_gives_one_replacement():
    edits = resolve_edits(DOC, ["version"], "2.0.0")
    start = DOC.index('"1.0.0"')
    assert edits == [EditDescriptor(start, len('"1.0.0"'), '"2.0.0"')]


def test_replace_nested_array_element():
    assert edit('{"tags": ["a", "b"]}', ["tags", 1], "c") == '{"tags": ["a", "c"]}'


def test_replace_with_structure_in_multiline_document():
    out = edit(DOC, ["tags"], {"k": [1]})
    assert out == '{\n  "name": "demo",\n  "version": "1.0.0",\n  "tags": {\n    "k": [\n      1\n    ]\n  }\n}\n'
    assert json.loads(out)["tags"] == {"k": [1]}


def test_replace_with_structure_in_one_line_document():
    assert edit('{"a": 1, "b": 2}', ["a"], {"x": [1, 2]}) == '{"a": {"x": [1, 2]}, "b": 2}'


def test_insert_key_into_multiline_object():
    out = edit(DOC, ["license"], "MIT")
    assert out == '{\n  "name": "demo",\n  "version": "1.0.0",\n  "tags": ["a", "b"],\n  "license": "MIT"\n}\n'


def test_insert_structured_value_into_multiline_object():
    out = edit(DOC, ["meta"], {"a": 1})
    assert out.endswith('"tags": ["a", "b"],\n  "meta": {\n    "a": 1\n  }\n}\n')
    assert json.loads(out)["meta"] == {"a": 1}


def test_insert_key_into_one_line_object():
    assert edit('{"a": 1}', ["b"], 2) == '{"a": 1, "b": 2}'


def test_insert_key_into_empty_object():
    assert edit('{"a": {}}', ["a", "x"], 1) == '{"a": {"x": 1}}'
    assert edit("{}", ["x"], True) == '{"x": true}'


def test_insert_key_into_empty_multiline_object():
    text = '{\n  "a": {\n  }\n}'
    assert edit(text, ["a", "x"], 1) == '{\n  "a": {\n    "x": 1\n  }\n}'


def test_insert_key_uses_indent_of_existing_members():
    text = '{\n    "a": 1\n}'
    assert edit(text, ["b"], [1]) == '{\n    "a": 1,\n    "b": [\n      1\n    ]\n}'


def test_insert_key_when_first_member_shares_the_brace_line():
    text = '{"a": 1,\n "b": 2}'
    assert edit(text, ["c"], 3) == '{"a": 1,\n "b": 2,\n "c": 3}'


def test_insert_key_when_no_member_starts_a_line():
    text = '{"a": 1, "b": 2\n}'
    assert edit(text, ["c"], 3) == '{"a": 1, "b": 2,\n  "c": 3\n}'


def test_append_to_array():
    assert edit('{"tags": ["a", "b"]}', ["tags", 2], "c") == '{"tags": ["a", "b", "c"]}'


def test_index_past_end_appends():
    assert edit("[1, 2]", [7], 3) == "[1, 2, 3]"


def test_append_to_empty_array():
    assert edit('{"tags": []}', ["tags", 0], "x") == '{"tags": ["x"]}'
    assert edit("[\n]", [0], 1) == "[\n  1\n]"


def test_append_to_multiline_array():
    assert edit("[\n  1,\n  2\n]", [2], 3) == "[\n  1,\n  2,\n  3\n]"


def test_tab_indented_document():
    opts = FormattingOptions(insert_spaces=False)
    out = edit('{\n\t"a": 1\n}', ["b"], [1], opts)
    assert out == '{\n\t"a": 1,\n\t"b": [\n\t\t1\n\t]\n}'


def test_crlf_document_keeps_crlf_on_insert():
    out = edit('{\r\n  "a": 1\r\n}\r\n', ["b"], 2)
    assert out == '{\r\n  "a": 1,\r\n  "b": 2\r\n}\r\n'


def test_crlf_document_keeps_crlf_on_structured_replace():
    out = edit('{\r\n  "a": 1\r\n}', ["a"], {"x": 1})
    assert out == '{\r\n  "a": {\r\n    "x": 1\r\n  }\r\n}'
    assert "\n" not in out.replace("\r\n", "")


def test_crlf_document_keeps_crlf_when_filling_empty_containers():
    assert edit("{\r\n}", ["x"], 1) == '{\r\n  "x": 1\r\n}'
    assert edit("[\r\n  1\r\n]", [1], [2]) == "[\r\n  1,\r\n  [\r\n    2\r\n  ]\r\n]"


def test_document_with_integer_past_int_digit_limit():
    big = "1" * 5000
    text = '{"a": ' + big + ', "b": 1}'
    assert edit(text, ["b"], 2) == '{"a": ' + big + ', "b": 2}'
    assert edit(text, ["a"], 0) == '{"a": 0, "b": 1}'


def test_non_ascii_key_and_value():
    assert edit('{"a": 1}', ["ключ"], "значение") == '{"a": 1, "ключ": "значение"}'


def test_key_needing_escapes():
    assert edit('{"a\\"b": 1}', ['a"b'], 2) == '{"a\\"b": 2}'
    assert edit("{}", ['q"'], 1) == '{"q\\"": 1}'


def test_duplicate_keys_edit_the_last_occurrence():
    assert edit('{"a": 1, "a": 2}', ["a"], 3) == '{"a": 1, "a": 3}'


@pytest.mark.parametrize(
    "text,path",
    [
        ('{"a": 1}', ["a", "b"]),
        ('{"a": 1}', ["a", 0]),
        ('{"a": "str"}', ["a", 0]),
        ("[1, 2]", ["x"]),
        ('{"a": 1}', [0]),
        ('{"a": 1}', ["x", "y"]),
        ("[[1]]", [3, 0]),
        ("5", ["a"]),
        ('{"a": 1}', [-1]),
        ('{"a": 1}', [True]),
        ('{"a": 1}', [1.5]),
        ('{"a": 1}', "a"),
        ('{"a": 1}', []),
    ],
)
def test_unresolvable_paths_raise_address_error(text, path):
    with pytest.raises(AddressError):
        resolve_edits(text, path, 1)


def test_invalid_document_raises_parse_error():
    with pytest.raises(DocumentParseError):
        resolve_edits('{"a": 1', ["a"], 2)
