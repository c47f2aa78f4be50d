"""
Unit tests for launching downloaded files
"""
from unittest.mock import patch

from core.file_opener import open_with_default


def test_missing_file(tmp_path):
    success, error = open_with_default(tmp_path / "gone.txt")
    assert not success
    assert "File not found" in error


@patch('core.file_opener.sys.platform', 'linux')
@patch('subprocess.Popen')
def test_xdg_open_on_linux(mock_popen, tmp_path):
    target = tmp_path / "doc.pdf"
    target.write_text("x")
    assert open_with_default(str(target)) == (True, "")
    assert mock_popen.call_args[0][0] == ['xdg-open', str(target)]


@patch('core.file_opener.sys.platform', 'linux')
@patch('subprocess.Popen', side_effect=FileNotFoundError("xdg-open"))
def test_launcher_missing(_mock_popen, tmp_path):
    target = tmp_path / "doc.pdf"
    target.write_text("x")
    success, error = open_with_default(target)
    assert not success
    assert "xdg-open" in error
