"""
Tests for content_fingerprint.py and revision_resolver.py.
"""

import hashlib
import shutil
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from content_fingerprint import hash_of_file, normalize_digest, prefixed_digest, sha256_hex
from revision_resolver import NO_REVISION, current_revision, resolve_revision


class TestContentFingerprint:

    def test_sha256_hex_matches_hashlib(self):
        assert sha256_hex("hello\n") == hashlib.sha256(b"hello\n").hexdigest()

    def test_prefixed_digest(self):
        assert prefixed_digest("x") == "sha256:" + hashlib.sha256(b"x").hexdigest()

    def test_hash_of_file_matches_content_hash(self, tmp_path):
        target = tmp_path / "a.txt"
        target.write_bytes("line one\r\nline two\n".encode("utf-8"))
        assert hash_of_file(target) == sha256_hex("line one\r\nline two\n")

    def test_missing_file_has_no_hash(self, tmp_path):
        assert hash_of_file(tmp_path / "nope.txt") is None

    def test_directory_has_no_hash(self, tmp_path):
        assert hash_of_file(tmp_path) is None

    def test_undecodable_file_still_hashed(self, tmp_path):
        target = tmp_path / "blob.dat"
        target.write_bytes(b"\xff\xfeold")
        assert hash_of_file(target) == hashlib.sha256(b"\xff\xfeold").hexdigest()

    def test_nul_in_path_has_no_hash(self, tmp_path):
        assert hash_of_file(str(tmp_path) + "/bad\x00name") is None

    def test_normalize_digest(self):
        assert normalize_digest("SHA256:ABCDEF") == "abcdef"
        assert normalize_digest(" abcdef ") == "abcdef"


class TestRevisionResolver:

    def test_no_repository_returns_sentinel(self, tmp_path):
        assert current_revision(tmp_path) == NO_REVISION
        info = resolve_revision(tmp_path)
        assert info.available is False
        assert info.revision_id == NO_REVISION

    def test_missing_directory_returns_sentinel(self, tmp_path):
        assert current_revision(tmp_path / "does-not-exist") == NO_REVISION

    @patch("revision_resolver.subprocess.run")
    def test_timeout_returns_sentinel(self, mock_run, tmp_path):
        mock_run.side_effect = subprocess.TimeoutExpired("git", 2)
        info = resolve_revision(tmp_path, timeout=0.01)
        assert info.revision_id == NO_REVISION
        assert info.error == "timeout"

    @patch("revision_resolver.subprocess.run")
    def test_git_not_installed(self, mock_run, tmp_path):
        mock_run.side_effect = FileNotFoundError("git")
        assert current_revision(tmp_path) == NO_REVISION

    @patch("revision_resolver.subprocess.run")
    def test_successful_query(self, mock_run, tmp_path):
        mock_run.return_value = MagicMock(returncode=0, stdout="abc123\n", stderr="")
        info = resolve_revision(tmp_path, timeout=1.5)
        assert info.available is True
        assert info.revision_id == "abc123"
        assert mock_run.call_args.kwargs["timeout"] == 1.5

    def test_timeout_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INTENT_GATE_REVISION_TIMEOUT", "0.5")
        with patch("revision_resolver.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="abc\n", stderr="")
            resolve_revision(tmp_path)
            assert mock_run.call_args.kwargs["timeout"] == 0.5

    @pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
    def test_real_repository(self, tmp_path):
        git = ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", "-c", "commit.gpgsign=false"]
        subprocess.run(git + ["init", "-q"], cwd=tmp_path, check=True)
        (tmp_path / "f.txt").write_text("x", encoding="utf-8")
        subprocess.run(git + ["add", "f.txt"], cwd=tmp_path, check=True)
        subprocess.run(git + ["commit", "-q", "-m", "init"], cwd=tmp_path, check=True)

        head = subprocess.run(
            ["git", "rev-parse", "HEAD"], cwd=tmp_path, capture_output=True, text=True, check=True
        ).stdout.strip()
        assert current_revision(tmp_path) == head
