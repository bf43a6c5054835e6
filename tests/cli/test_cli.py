# tests/cli/test_cli.py
"""Tests for the retainer CLI."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from tests.conftest import make_store_dir, stamp_days_ago

# Stderr output is combined with stdout by default when using CliRunner.invoke()
runner = CliRunner()


@pytest.fixture
def store_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Local store with one expired chain, one fresh full and a stray file.

    Runs each test from an empty working directory so no retainer.yaml or
    .env from the checkout leaks in.
    """
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return make_store_dir(
        tmp_path / "store",
        [
            f"home-full-{stamp_days_ago(100)}.tar.gz",
            f"home-incr-{stamp_days_ago(90)}.tar.gz",
            f"home-full-{stamp_days_ago(5)}.tar.gz",
            f"work-full-{stamp_days_ago(100)}.tar.gz",
            "readme.txt",
        ],
    )


def _local(store_dir: Path, *args: str) -> list[str]:
    return ["--no-dotenv", args[0], "--protocol", "local", "-D", str(store_dir), *args[1:]]


class TestCLIBasics:
    def test_version_flag(self) -> None:
        from retainer import __version__
        from retainer.cli import app

        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"retainer version {__version__}" in result.output

    def test_help_lists_commands(self) -> None:
        from retainer.cli import app

        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "expire" in result.output
        assert "inspect" in result.output

    def test_missing_env_file(self, tmp_path: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, ["--env-file", str(tmp_path / "missing.env"), "inspect"])

        assert result.exit_code == 1
        assert ".env file not found" in result.output


class TestExpireCommand:
    def test_dry_run_lists_without_deleting(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "expire", "-p", "home", "-d", "30", "--dry-run"))

        assert result.exit_code == 0, result.output
        assert "Would delete 2 file(s) of profile 'home':" in result.output
        lines = [line.strip() for line in result.output.splitlines() if line.startswith("  ")]
        assert lines == [f"home-full-{stamp_days_ago(100)}.tar.gz", f"home-incr-{stamp_days_ago(90)}.tar.gz"]
        assert len(list(store_dir.iterdir())) == 5

    def test_deletes_with_yes(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "expire", "--all", "-d", "30", "--yes"))

        assert result.exit_code == 0, result.output
        assert "Deleted: 3" in result.output
        assert sorted(p.name for p in store_dir.iterdir()) == [
            f"home-full-{stamp_days_ago(5)}.tar.gz",
            "readme.txt",
        ]

    def test_truncate_reported(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "expire", "-p", "work", "-d", "30", "--yes", "--truncate"))

        assert result.exit_code == 0, result.output
        assert "Truncated first: 1" in result.output
        assert "Deleted: 1" in result.output

    def test_confirmation_declined(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "expire", "-p", "home", "-d", "30"), input="n\n")

        assert result.exit_code == 1
        assert "Aborted." in result.output
        assert len(list(store_dir.iterdir())) == 5

    def test_confirmation_accepted(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "expire", "-p", "home", "-d", "30"), input="y\n")

        assert result.exit_code == 0, result.output
        assert "Deleted: 2" in result.output

    def test_young_chain_keeps_everything(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "expire", "-p", "home", "-d", "95", "--yes"))

        assert result.exit_code == 0, result.output
        assert "No backups of profile 'home' can be deleted at 95 days." in result.output
        assert len(list(store_dir.iterdir())) == 5

    def test_unknown_profile_deletes_nothing(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "expire", "-p", "media", "-d", "0", "--yes"))

        assert result.exit_code == 0
        assert "No backups of profile 'media'" in result.output

    def test_no_scope(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "expire", "-d", "30"))

        assert result.exit_code == 1
        assert "No scope selected" in result.output

    def test_ambiguous_scope(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "expire", "-p", "home", "--all", "-d", "30"))

        assert result.exit_code == 1
        assert "not both" in result.output

    def test_max_age_required(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "expire", "--all"))

        assert result.exit_code == 1
        assert "--max-age-days is required" in result.output

    def test_negative_max_age(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "expire", "--all", "--max-age-days=-1"))

        assert result.exit_code == 1
        assert "Configuration errors" in result.output

    def test_missing_store_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from retainer.cli import app

        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, _local(tmp_path / "absent", "expire", "--all", "-d", "30"))

        assert result.exit_code == 1
        assert "Backup directory not found" in result.output

    def test_ftp_without_host(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, ["--no-dotenv", "expire", "--all", "-d", "30"])

        assert result.exit_code == 1
        assert "remote.host is required" in result.output

    def test_missing_settings_file(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "expire", "--all", "-d", "30", "-s", "nope.yaml"))

        assert result.exit_code == 1
        assert "Settings file not found" in result.output

    def test_settings_file_in_working_directory(self, store_dir: Path) -> None:
        from retainer.cli import app

        Path("retainer.yaml").write_text(f"""
expiry:
  max_age_days: 30
  profile: work
remote:
  protocol: local
  directory: "{store_dir}"
execution:
  dry_run: true
""")

        result = runner.invoke(app, ["--no-dotenv", "expire"])

        assert result.exit_code == 0, result.output
        assert "Would delete 1 file(s) of profile 'work':" in result.output

    def test_cli_scope_replaces_configured_scope(self, store_dir: Path) -> None:
        from retainer.cli import app

        Path("retainer.yaml").write_text("""
expiry:
  profile: work
""")

        result = runner.invoke(app, _local(store_dir, "expire", "--all", "-d", "30", "--dry-run"))

        assert result.exit_code == 0, result.output
        assert "Would delete 3 file(s) of all profiles:" in result.output

    def test_password_prompted_for_named_user(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        from retainer import cli
        from retainer.contracts import StoreConnectionError

        monkeypatch.chdir(tmp_path)
        received: dict[str, str | None] = {}

        def refuse(remote: object, *, password: str | None = None) -> None:
            received["password"] = password
            raise StoreConnectionError("530 Login incorrect")

        monkeypatch.setattr(cli, "open_store", refuse)

        result = runner.invoke(
            cli.app,
            ["--no-dotenv", "expire", "-H", "ftp.example.org", "-u", "backup", "--all", "-d", "30"],
            input="hunter2\n",
        )

        assert result.exit_code == 1
        assert received["password"] == "hunter2"
        assert "530 Login incorrect" in result.output
        assert "hunter2" not in result.output

    def test_environment_without_settings_file(self, store_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from retainer.cli import app

        monkeypatch.setenv("RETAINER_EXPIRY__MAX_AGE_DAYS", "30")
        monkeypatch.setenv("RETAINER_EXPIRY__PROFILE", "work")
        monkeypatch.setenv("RETAINER_REMOTE__PROTOCOL", "local")
        monkeypatch.setenv("RETAINER_REMOTE__DIRECTORY", str(store_dir))
        monkeypatch.setenv("RETAINER_EXECUTION__DRY_RUN", "true")

        result = runner.invoke(app, ["--no-dotenv", "expire"])

        assert result.exit_code == 0, result.output
        assert "Would delete 1 file(s) of profile 'work':" in result.output
        assert len(list(store_dir.iterdir())) == 5

    def test_numeric_password_from_environment_skips_prompt(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        from retainer import cli
        from retainer.contracts import StoreConnectionError

        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("RETAINER_REMOTE__PASSWORD", "123456")
        received: dict[str, str | None] = {}

        def refuse(remote: object, *, password: str | None = None) -> None:
            received["password"] = password
            received["configured"] = remote.password  # type: ignore[attr-defined]
            raise StoreConnectionError("530 Login incorrect")

        monkeypatch.setattr(cli, "open_store", refuse)

        result = runner.invoke(
            cli.app,
            ["--no-dotenv", "expire", "-H", "ftp.example.org", "-u", "backup", "--all", "-d", "30"],
        )

        assert result.exit_code == 1
        assert "Password for" not in result.output
        assert received["password"] is None
        assert received["configured"] == "123456"


class TestInspectCommand:
    def test_table(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "inspect", "-p", "home", "-d", "30"))

        assert result.exit_code == 0, result.output
        rows = {line.split()[-1]: line.split()[0] for line in result.output.splitlines() if line.strip()}
        assert rows[f"home-full-{stamp_days_ago(100)}.tar.gz"] == "expired"
        assert rows[f"home-incr-{stamp_days_ago(90)}.tar.gz"] == "expired"
        assert rows[f"home-full-{stamp_days_ago(5)}.tar.gz"] == "within_retention"
        assert rows[f"work-full-{stamp_days_ago(100)}.tar.gz"] == "out_of_scope"
        assert rows["readme.txt"] == "unrecognized"
        assert len(list(store_dir.iterdir())) == 5

    def test_json(self, store_dir: Path) -> None:
        from retainer.cli import app

        result = runner.invoke(app, _local(store_dir, "inspect", "-p", "home", "-d", "95", "--json"))

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        by_name = {item["name"]: item for item in payload}
        assert by_name[f"home-full-{stamp_days_ago(100)}.tar.gz"]["reason"] == "protected_by_dependent"
        assert by_name[f"home-incr-{stamp_days_ago(90)}.tar.gz"]["reason"] == "within_retention"
        assert not any(item["deletable"] for item in payload)

    def test_empty_store(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from retainer.cli import app

        monkeypatch.chdir(tmp_path)
        empty = make_store_dir(tmp_path / "empty", [])

        result = runner.invoke(app, _local(empty, "inspect", "--all", "-d", "30"))

        assert result.exit_code == 0
        assert "No files found." in result.output

    def test_duplicity_grammar(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from retainer.cli import app

        monkeypatch.chdir(tmp_path)
        stamp = f"{stamp_days_ago(60)}T030000Z"
        store = make_store_dir(tmp_path / "dup", [f"duplicity-full.{stamp}.manifest.gpg"])

        result = runner.invoke(app, _local(store, "inspect", "-p", "default", "-d", "30", "--grammar", "duplicity"))

        assert result.exit_code == 0, result.output
        assert "expired" in result.output
