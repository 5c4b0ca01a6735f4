"""Tests for the KeyValues serializer."""

from pathlib import PureWindowsPath

import pytest

from steamdeploy.lib.steam import vdf


class TestQuote:
    """Tests for scalar quoting."""

    def test_plain_string(self):
        assert vdf.quote("Win64/*") == '"Win64/*"'

    def test_integer(self):
        assert vdf.quote(480) == '"480"'

    def test_escapes_quotes_and_backslashes(self):
        assert vdf.quote('say "hi" \\o/') == '"say \\"hi\\" \\\\o/"'

    def test_escapes_control_characters(self):
        assert vdf.quote("line1\nline2\tend") == '"line1\\nline2\\tend"'

    def test_braces_are_left_inside_quotes(self):
        assert vdf.quote("} {") == '"} {"'

    def test_path_uses_forward_slashes(self):
        assert vdf.quote(PureWindowsPath(r"D:\Builds\Game")) == '"D:/Builds/Game"'


class TestDumps:
    """Tests for document rendering."""

    def test_nested_document(self):
        document = {
            "AppBuild": {
                "AppID": 100,
                "Depots": {
                    "101": {
                        "FileMapping": {
                            "LocalPath": "Win64/*",
                        }
                    }
                },
            }
        }
        expected = (
            '"AppBuild"\n'
            '{\n'
            '\t"AppID" "100"\n'
            '\t"Depots"\n'
            '\t{\n'
            '\t\t"101"\n'
            '\t\t{\n'
            '\t\t\t"FileMapping"\n'
            '\t\t\t{\n'
            '\t\t\t\t"LocalPath" "Win64/*"\n'
            '\t\t\t}\n'
            '\t\t}\n'
            '\t}\n'
            '}\n'
        )
        assert vdf.dumps(document) == expected

    def test_custom_indent(self):
        assert vdf.dumps({"A": {"B": "c"}}, indent="    ") == '"A"\n{\n    "B" "c"\n}\n'

    def test_injection_stays_inside_value(self):
        text = vdf.dumps({"Desc": '" }\n"SetLive" "default'})
        assert text.count("\n") == 1
        assert text == '"Desc" "\\" }\\n\\"SetLive\\" \\"default"\n'

    @pytest.mark.parametrize("value", [None, 1.5, True, ["a"]])
    def test_unsupported_values(self, value):
        with pytest.raises(TypeError):
            vdf.dumps({"Key": value})


class TestDump:
    """Tests for writing documents to disk."""

    def test_creates_parent_directories(self, tmp_path):
        output = tmp_path / "nested" / "deeper" / "app.vdf"
        written = vdf.dump({"AppBuild": {"AppID": 1}}, output)

        assert written == output
        assert output.read_text(encoding="utf-8") == '"AppBuild"\n{\n\t"AppID" "1"\n}\n'
