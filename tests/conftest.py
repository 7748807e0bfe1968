"""Pytest configuration for shared test fixtures."""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest


def _ensure_project_root_on_path(source_file: Path) -> None:
    """Add the repository root to ``sys.path`` when running from subdirectories."""

    for candidate in [source_file.parent, *source_file.parents]:
        if (candidate / "shared").is_dir():
            project_root = str(candidate)
            if project_root not in sys.path:
                sys.path.insert(0, project_root)
            break


_ensure_project_root_on_path(Path(__file__).resolve())

from shared.testing.environment import apply_required_test_environment

apply_required_test_environment()

from shared.config import HelpSettings  # noqa: E402


@pytest.fixture
def help_settings() -> HelpSettings:
    return HelpSettings(
        bot_name="helpbot",
        bot_alias="helpbot",
        command_prefix="!",
        reply_in_private=False,
        disable_http=False,
        hidden_commands=(),
        suggest_ignore_channels=("general",),
        admin_role_ids=frozenset({42}),
        port=0,
        log_level="INFO",
    )


@pytest.fixture
def sample_catalog() -> list[str]:
    return [
        "begin group Alpha",
        "hubot foo - does foo",
        "begin admin",
        "hubot secret - admin thing",
        "end admin",
        "end group",
        "hubot ping - reply with pong",
        "begin group Beta",
        "hubot bar <name> - greets <name> & friends",
        "end group",
    ]


@pytest.fixture
def make_member():
    """Build a guild member stub with the given permissions and roles."""

    def _make(*, administrator: bool = False, role_ids: tuple[int, ...] = ()) -> SimpleNamespace:
        return SimpleNamespace(
            name="member",
            guild_permissions=SimpleNamespace(administrator=administrator),
            roles=[SimpleNamespace(id=role_id) for role_id in role_ids],
        )

    return _make
