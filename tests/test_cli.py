"""
Tests for the fromvdf command line.
"""

import io
import json

import pytest
from fromvdf import __version__
from fromvdf.cli import main


@pytest.fixture
def vdf_file(tmp_path):
    """Write VDF text to a temp file and return its path."""
    def _write(text, name="input.vdf"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


class TestParseCommand:

    def test_prints_json(self, appmanifest_path, capsys):
        assert main(["parse", str(appmanifest_path)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["AppState"]["appid"] == "440"
        assert data["AppState"]["InstalledDepots"]["441"]["size"] == "22896440380"

    def test_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO('"Key" "Value"'))
        assert main(["parse", "-"]) == 0
        assert json.loads(capsys.readouterr().out) == {"Key": "Value"}

    def test_unclosed_string_fails(self, vdf_file, capsys):
        path = vdf_file('"K" "V')
        assert main(["parse", str(path)]) == 1
        err = capsys.readouterr().err
        assert f"Error parsing VDF: {path}:1:5: unexpected end of input: unclosed string" in err

    def test_lossy_flag(self, vdf_file, capsys):
        path = vdf_file('"K" "V')
        assert main(["parse", "--lossy", str(path)]) == 0
        assert json.loads(capsys.readouterr().out) == {"K": "V"}

    def test_lossy_from_config(self, vdf_file, tmp_path, capsys):
        path = vdf_file('"K" "V')
        config_path = tmp_path / "fromvdf.yaml"
        config_path.write_text("lossy: true\n", encoding="utf-8")
        assert main(["--config", str(config_path), "parse", str(path)]) == 0
        assert json.loads(capsys.readouterr().out) == {"K": "V"}

    def test_missing_value_fails_even_when_lossy(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO('"K"'))
        assert main(["parse", "-l", "-"]) == 1
        assert "<stdin>:1:4: unexpected end of input: missing value" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["parse", str(tmp_path / "nope.vdf")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_depth_beyond_interpreter_stack(self, vdf_file, monkeypatch, capsys):
        path = vdf_file('"k" {' * 3000 + '}' * 3000)
        monkeypatch.setenv("FROMVDF_MAX_DEPTH", "100000")
        assert main(["parse", str(path)]) == 1
        assert "nesting too deep" in capsys.readouterr().err

    def test_summary(self, libraryfolders_path, capsys):
        assert main(["parse", "--summary", str(libraryfolders_path)]) == 0
        out = capsys.readouterr().out
        assert "Top-level entries: 1" in out
        assert "- libraryfolders: table (2 entries)" in out

    def test_positions(self, vdf_file, capsys):
        path = vdf_file('"K" "V"')
        assert main(["parse", "--positions", str(path)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["entries"]["K"] == {"_type": "scalar", "value": "V", "line": 1, "column": 5}


class TestFormatCommand:

    def test_prints_formatted(self, vdf_file, capsys):
        path = vdf_file('"R" { "b" "2" "a" "1" } // done')
        assert main(["format", "--sort-keys", str(path)]) == 0
        assert capsys.readouterr().out == '"R"\n{\n\t"a"\t\t"1"\n\t"b"\t\t"2"\n}\n'

    def test_inplace(self, vdf_file, capsys):
        path = vdf_file('"K"   "V"')
        assert main(["format", "-i", str(path)]) == 0
        assert path.read_text(encoding="utf-8") == '"K"\t\t"V"\n'
        assert "Formatted:" in capsys.readouterr().out

    def test_check(self, appmanifest_path, libraryfolders_path):
        assert main(["format", "--check", str(appmanifest_path)]) == 0
        assert main(["format", "--check", str(libraryfolders_path)]) == 1

    def test_parse_error(self, vdf_file, capsys):
        path = vdf_file('"R" { "a" "1"')
        assert main(["format", str(path)]) == 1
        assert "unexpected token in table: expected key or '}'" in capsys.readouterr().err


class TestConfigCommand:

    def test_show(self, capsys):
        assert main(["config"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["lossy"] is False

    def test_init(self, tmp_path, capsys):
        target = tmp_path / "fromvdf.yaml"
        assert main(["config", "--init", "--init-path", str(target)]) == 0
        assert target.exists()
        assert str(target) in capsys.readouterr().out


class TestGlobalOptions:

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: fromvdf" in capsys.readouterr().out

    def test_log_level_is_case_insensitive(self, capsys):
        assert main(["--log-level", "debug", "config"]) == 0

    def test_unknown_log_level_is_a_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--log-level", "verbose", "config"])
        assert exc_info.value.code == 2
        assert "invalid choice" in capsys.readouterr().err

    def test_unknown_log_level_in_config_falls_back(self, tmp_path, capsys):
        config_path = tmp_path / "fromvdf.yaml"
        config_path.write_text("log_level: verbose\n", encoding="utf-8")
        assert main(["--config", str(config_path), "config"]) == 0
        assert "unknown log level 'VERBOSE'" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out
