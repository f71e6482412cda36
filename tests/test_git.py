import subprocess
from pathlib import Path
from unittest.mock import patch

from api_test_updater.git import changed_files, file_at_revision, is_git_repository


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=["git"], returncode=returncode, stdout=stdout, stderr=stderr)


class TestChangedFiles:
    @patch("api_test_updater.git.subprocess.run")
    def test_parses_names(self, mock_run):
        mock_run.return_value = _completed(stdout="api/openapi.yaml\n\nsrc/app.js\n")
        assert changed_files(Path("."), "HEAD~1") == ["api/openapi.yaml", "src/app.js"]
        args = mock_run.call_args[0][0]
        assert args == ["git", "diff", "--name-only", "HEAD~1", "HEAD"]

    @patch("api_test_updater.git.subprocess.run")
    def test_failure_returns_empty(self, mock_run):
        mock_run.return_value = _completed(returncode=128, stderr="fatal: bad revision")
        assert changed_files(Path(".")) == []


class TestFileAtRevision:
    @patch("api_test_updater.git.subprocess.run")
    def test_returns_content(self, mock_run):
        mock_run.return_value = _completed(stdout="openapi: 3.0.0\n")
        assert file_at_revision(Path("."), "openapi.yaml", "HEAD~1") == "openapi: 3.0.0\n"
        assert mock_run.call_args[0][0] == ["git", "show", "HEAD~1:openapi.yaml"]

    @patch("api_test_updater.git.subprocess.run")
    def test_missing_file_returns_none(self, mock_run):
        mock_run.return_value = _completed(returncode=128, stderr="fatal: path does not exist")
        assert file_at_revision(Path("."), "openapi.yaml") is None


class TestIsGitRepository:
    @patch("api_test_updater.git.subprocess.run")
    def test_true(self, mock_run):
        mock_run.return_value = _completed()
        assert is_git_repository(Path(".")) is True

    @patch("api_test_updater.git.subprocess.run")
    def test_false_when_git_missing(self, mock_run):
        mock_run.side_effect = FileNotFoundError("git")
        assert is_git_repository(Path(".")) is False
