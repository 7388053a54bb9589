"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
Each module run gets its own SQLite file seeded from data/sample_content.json.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture(scope="module")
def cli_env(tmp_path_factory):
    """Environment pointing the CLI at a fresh, seeded database."""
    db_path = tmp_path_factory.mktemp("tm") / "smoke.db"
    env = {
        **os.environ,
        "TM_BACKEND": "sql",
        "TM_DATABASE_URL": f"sqlite:///{db_path}",
        "TM_LOG_LEVEL": "WARNING",
        "COLUMNS": "200",
    }
    env.pop("TM_USER", None)

    code, stdout, stderr = run_cli_command("db seed data/sample_content.json", env)
    assert code == 0, f"Seeding failed: {stderr}"
    return env


def run_cli_command(command: str, env: dict | None = None, timeout: int = 30) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        command: The command to run (after 'python -m tensemaster.cli.main')
        env: Environment for the subprocess
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    full_command = f"{sys.executable} -m tensemaster.cli.main {command}"

    result = subprocess.run(
        full_command,
        shell=True,
        cwd=PROJECT_ROOT,
        env=env,
        capture_output=True,
        text=True,
        timeout=timeout,
    )

    return result.returncode, result.stdout, result.stderr


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        """Main help should list the command groups."""
        code, stdout, stderr = run_cli_command("--help")

        assert code == 0, f"Help failed: {stderr}"
        assert "Commands" in stdout
        for command in ("quiz", "daily", "gauntlet", "shop", "leaderboard"):
            assert command in stdout

    def test_gauntlet_help(self):
        code, stdout, stderr = run_cli_command("gauntlet --help")

        assert code == 0, f"Gauntlet help failed: {stderr}"
        assert "detective" in stdout

    def test_quiz_help(self):
        code, stdout, stderr = run_cli_command("quiz --help")

        assert code == 0, f"Quiz help failed: {stderr}"


class TestProfileCommands:
    """Read-only profile commands against the seeded database."""

    def test_profile(self, cli_env):
        code, stdout, stderr = run_cli_command("profile --user demo", cli_env)

        assert code == 0, f"Profile failed: {stderr}"
        assert "demo" in stdout
        assert "300" in stdout

    def test_unknown_user(self, cli_env):
        code, stdout, stderr = run_cli_command("profile --user nobody", cli_env)

        assert code == 1
        assert "nobody" in stdout

    def test_leaderboard(self, cli_env):
        code, stdout, stderr = run_cli_command("leaderboard", cli_env)

        assert code == 0, f"Leaderboard failed: {stderr}"
        assert stdout.index("rival") < stdout.index("demo")

    def test_achievements(self, cli_env):
        code, stdout, stderr = run_cli_command("achievements --user demo", cli_env)

        assert code == 0, f"Achievements failed: {stderr}"
        assert "First Step" in stdout

    def test_progress(self, cli_env):
        code, stdout, stderr = run_cli_command("progress --user demo", cli_env)

        assert code == 0, f"Progress failed: {stderr}"
        assert "Present Tenses" in stdout
        assert "Phrasal Verbs" in stdout

    def test_login(self, cli_env):
        code, stdout, stderr = run_cli_command("login --user demo", cli_env)

        assert code == 0, f"Login failed: {stderr}"
        assert "Streak" in stdout


class TestShopCommands:
    """Shop listing and purchases."""

    def test_list(self, cli_env):
        code, stdout, stderr = run_cli_command("shop list", cli_env)

        assert code == 0, f"Shop list failed: {stderr}"
        assert "powerup-hint" in stdout

    def test_buy_and_apply(self, cli_env):
        code, stdout, stderr = run_cli_command("shop buy theme-ocean --user demo", cli_env)
        assert code == 0, f"Buy failed: {stderr}"
        assert "Ocean Depths" in stdout

        code, stdout, stderr = run_cli_command("shop theme theme-ocean --user demo", cli_env)
        assert code == 0, f"Theme failed: {stderr}"

    def test_insufficient_coins(self, cli_env):
        code, stdout, stderr = run_cli_command("shop buy theme-diamond --user demo", cli_env)

        assert code == 1
        assert "Not enough AI Coins" in stdout

    def test_apply_unowned_theme(self, cli_env):
        code, stdout, stderr = run_cli_command("shop theme theme-gilded --user demo", cli_env)

        assert code == 1


class TestDailyCommand:
    def test_unknown_mode(self, cli_env):
        code, stdout, stderr = run_cli_command("daily sudden-death --user demo", cli_env)

        assert code == 1
        assert "Unknown daily mode" in stdout
