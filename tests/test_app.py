"""
Tests for the command-line entry point.
"""

import os
from unittest import mock

import pytest

from wable import app


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """No credentials from the environment and no .env in the working directory."""
    with mock.patch.dict(os.environ):
        for name in ("WORKABLE_SUBDOMAIN", "WORKABLE_TOKEN", "WABLE_LOG_LEVEL"):
            os.environ.pop(name, None)
        monkeypatch.chdir(tmp_path)
        yield


class TestMain:
    """Flag handling and exit codes."""

    def test_requires_credentials(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            app.main(["--get-jobs"])

        assert excinfo.value.code == 1
        assert "--subdomain and --token are required" in capsys.readouterr().err

    def test_credentials_from_env(self, monkeypatch):
        monkeypatch.setenv("WORKABLE_SUBDOMAIN", "acme")
        monkeypatch.setenv("WORKABLE_TOKEN", "tok")

        with mock.patch.object(app, "JobManager") as job_manager:
            app.main(["--get-jobs", "--base-dir", "out", "--updated-after", "2024-01-01"])

        api = job_manager.call_args.args[0]
        assert api.base_url == "https://acme.workable.com/spi/v3"
        job_manager.return_value.process_all_jobs.assert_called_once_with("out", "2024-01-01")

    def test_credentials_from_dotenv(self, tmp_path):
        (tmp_path / ".env").write_text("WORKABLE_SUBDOMAIN=dotenvco\nWORKABLE_TOKEN=tok\n")

        with mock.patch.object(app, "JobManager") as job_manager:
            app.main(["--get-jobs"])

        assert job_manager.call_args.args[0].base_url == "https://dotenvco.workable.com/spi/v3"

    def test_get_candidates_requires_shortcode(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            app.main(["--get-candidates", "--subdomain", "acme", "--token", "tok"])

        assert excinfo.value.code == 1
        assert "--shortcode is required" in capsys.readouterr().err

    def test_get_candidates(self):
        with mock.patch.object(app, "CandidateManager") as candidate_manager:
            app.main([
                "--get-candidates", "--shortcode", "SE001",
                "--subdomain", "acme", "--token", "tok", "--base-dir", "out",
            ])

        candidate_manager.return_value.download_candidates.assert_called_once_with("SE001", "out", None)

    def test_fatal_error_exits_nonzero(self, capsys):
        with mock.patch.object(app, "JobManager") as job_manager:
            job_manager.return_value.process_all_jobs.side_effect = RuntimeError("Workable API error: 401 Unauthorized")
            with pytest.raises(SystemExit) as excinfo:
                app.main(["--get-jobs", "--subdomain", "acme", "--token", "tok"])

        assert excinfo.value.code == 1
        assert "Error processing jobs: Workable API error: 401 Unauthorized" in capsys.readouterr().err

    def test_move_disqualified_defaults_to_cwd(self):
        with mock.patch.object(app, "CandidateManager") as candidate_manager:
            app.main([
                "--move-disqualified-candidates-to", "rejected",
                "--subdomain", "acme", "--token", "tok",
            ])

        candidate_manager.return_value.move_disqualified_candidates.assert_called_once_with(
            os.getcwd(), "rejected",
        )

    def test_move_error_exits_nonzero(self, capsys):
        with mock.patch.object(app, "CandidateManager") as candidate_manager:
            candidate_manager.return_value.move_disqualified_candidates.side_effect = OSError("read-only")
            with pytest.raises(SystemExit) as excinfo:
                app.main([
                    "--move-disqualified-candidates-to", "rejected",
                    "--subdomain", "acme", "--token", "tok",
                ])

        assert excinfo.value.code == 1
        assert "Error moving disqualified candidates: read-only" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            app.main(["--version"])

        assert excinfo.value.code == 0
        assert "1.0.0" in capsys.readouterr().out
