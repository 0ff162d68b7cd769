"""Tests for reading and decoding the linter report."""
import json
import logging
import os
import tempfile

import pytest

from migrascope.models import SqlMigration
from migrascope.report import (
    ReportError, get_content, get_content_file, get_path_to_file, load_report, parse_report,
)


SAMPLE_REPORT = {
    "errors": {"billing": {"0001_init": [3, 4]}},
    "warnings": {"billing": {"0002_add_index": [8]}},
    "forwardDowntimes": {
        "billing": {
            "0002_add_index": {
                "unsafeSqls": [
                    {"index": 0, "at": "CREATE INDEX idx ON t (c)",
                     "operation": "CREATE INDEX", "operation_type": "INDEX"},
                ],
                "sql": "CREATE INDEX idx ON t (c);",
                "isReverse": False,
            },
        },
    },
    "backwardDowntimes": {},
}


def _write(tmpdir, name, content):
    path = os.path.join(tmpdir, name)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


def test_relative_path_joins_workspace():
    assert get_path_to_file("report.json", "/work") == "/work/report.json"


def test_absolute_path_is_kept():
    assert get_path_to_file("/tmp/report.json", "/work") == "/tmp/report.json"


def test_empty_path_is_none():
    assert get_path_to_file("", "/work") is None


def test_missing_file_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="migrascope.report"):
        assert get_content_file("/nonexistent/report.json") is None
    assert "doesn't exist" in caplog.text


def test_empty_file_warns(caplog):
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write(tmpdir, "report.json", "")
        with caplog.at_level(logging.WARNING, logger="migrascope.report"):
            assert get_content_file(path) is None
    assert "No content found" in caplog.text


def test_get_content_reads_relative_to_workspace():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write(tmpdir, "report.json", "{}")
        assert get_content("report.json", tmpdir) == "{}"


def test_parse_report_decodes_all_sections():
    report = parse_report(json.dumps(SAMPLE_REPORT))
    assert report.errors == {"billing": {"0001_init": [3, 4]}}
    assert report.warnings == {"billing": {"0002_add_index": [8]}}
    forward = report.forward_downtimes["billing"]["0002_add_index"]
    assert isinstance(forward, SqlMigration)
    assert forward.unsafe_sqls[0].operation == "CREATE INDEX"
    assert forward.sql == "CREATE INDEX idx ON t (c);"
    assert forward.is_reverse is False
    assert report.backward_downtimes == {}


def test_missing_sections_default_to_empty():
    report = parse_report('{"errors": {"a": {"0001": [1]}}}')
    assert report.warnings == {}
    assert report.forward_downtimes == {}
    assert report.backward_downtimes == {}


def test_invalid_json_raises():
    with pytest.raises(ReportError, match="not valid JSON"):
        parse_report("{not json")


def test_non_object_report_raises():
    with pytest.raises(ReportError):
        parse_report("[1, 2, 3]")


def test_non_numeric_culprits_raise():
    with pytest.raises(ReportError, match="errors.a.0001"):
        parse_report('{"errors": {"a": {"0001": ["x"]}}}')


def test_malformed_unsafe_sql_raises():
    bad = {"forwardDowntimes": {"a": {"0001": {"unsafeSqls": [{"at": "x"}], "sql": ""}}}}
    with pytest.raises(ReportError, match="unsafeSqls"):
        parse_report(json.dumps(bad))


def test_load_report_none_when_missing():
    with tempfile.TemporaryDirectory() as tmpdir:
        assert load_report("missing.json", tmpdir) is None


def test_load_report_from_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write(tmpdir, "report.json", json.dumps(SAMPLE_REPORT))
        report = load_report(path)
    assert report is not None
    assert "billing" in report.errors


def test_non_utf8_report_raises_report_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "report.json")
        with open(path, "wb") as f:
            f.write(b"\xff\xfe")
        with pytest.raises(ReportError, match="not valid UTF-8"):
            load_report(path)


def test_integer_culprits_pass_through_unchanged():
    report = parse_report('{"errors": {"a": {"0001": [3, 12]}}}')
    assert report.errors["a"]["0001"] == [3, 12]


def test_fractional_culprits_are_rejected():
    with pytest.raises(ReportError, match="list of integers"):
        parse_report('{"errors": {"a": {"0001": [3.7]}}}')


def test_is_reverse_must_be_a_boolean():
    bad = {"backwardDowntimes": {"a": {"0001": {"unsafeSqls": [], "sql": "", "isReverse": "false"}}}}
    with pytest.raises(ReportError, match="isReverse"):
        parse_report(json.dumps(bad))


def test_missing_is_reverse_defaults_to_forward():
    report = parse_report('{"forwardDowntimes": {"a": {"0001": {"sql": "SELECT 1"}}}}')
    assert report.forward_downtimes["a"]["0001"].is_reverse is False
