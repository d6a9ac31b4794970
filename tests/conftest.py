"""Test configuration and fixtures."""

from pathlib import Path
from typing import Generator

import pytest
from git import Actor, Repo

BRANCHES = [
    "220622f-parent",
    "220622f-parent--child",
    "220701b-fix-login",
    "220801r-release",
    "220632f-bad-date",
    "random-branch",
]

TAGS = ["v1.0.0", "v1.2.0", "0.9.0", "not-a-version", "v1.10.0"]


@pytest.fixture
def test_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a repository with convention branches and some tags.

    Returns:
        Path to the repository, checked out on 220622f-parent--child
    """
    local_path = tmp_path / "local"
    local_path.mkdir()
    local_repo = Repo.init(local_path)

    # Set up git config
    author = Actor("Test User", "test@example.com")
    local_repo.config_writer().set_value("user", "name", author.name).release()
    local_repo.config_writer().set_value("user", "email", author.email).release()

    # Create initial commit and make sure the first branch is called main
    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    local_repo.index.commit("Initial commit", author=author)
    local_repo.git.branch("-M", "main")

    for name in BRANCHES:
        local_repo.create_head(name)
    for tag in TAGS:
        local_repo.create_tag(tag)

    local_repo.heads["220622f-parent--child"].checkout()

    yield local_path

    # Cleanup is handled by pytest's tmp_path fixture
