"""Git repository operations."""

import logging
from pathlib import Path
from typing import Optional

from git import GitCommandError, InvalidGitRepositoryError, Repo
from packaging.version import InvalidVersion, Version

from bumper.branch import Branch, BranchFactory, make_branch, parse_branch

logger = logging.getLogger(__name__)

# If there's more than this many folders between the root of a repo and your code, refactor.
ROOT_SEARCH_LIMIT = 50


class GitError(Exception):
    """Git operation error."""


class RepositoryNotFound(GitError):
    """No .git folder above the starting directory."""

    def __init__(self, start: Path, levels: int) -> None:
        """Initialize error.

        Args:
            start: Directory the search started from
            levels: Number of directories checked, fewer than the limit when the filesystem root was reached
        """
        super().__init__(f"Git root not found within {levels} directories of {start}")
        self.start = start
        self.levels = levels


def find_git_root(start: Path, limit: int = ROOT_SEARCH_LIMIT) -> Path:
    """Move up the filesystem from start until a .git folder is found.

    Raises:
        RepositoryNotFound: If no .git folder is found within limit directories
    """
    directory = start.resolve()
    levels = 0
    while levels < limit:
        levels += 1
        if (directory / ".git").exists():
            logger.debug("Found git root at %s", directory)
            return directory
        if directory.parent == directory:
            break
        directory = directory.parent
    raise RepositoryNotFound(start, levels)


def is_git_repo(path: Path) -> bool:
    """Check if path is within a git repository."""
    try:
        find_git_root(path)
    except RepositoryNotFound:
        return False
    return True


def parse_branch_listing(output: str, current: str = "") -> list[str]:
    """Turn `git branch --format=%(refname:short)` output into names with the current branch first.

    Detached HEAD entries, blank lines and duplicates are dropped. The
    current branch only leads the list when it was listed.
    """
    names: list[str] = []
    for line in output.splitlines():
        name = line.strip()
        # Detached HEAD shows as "(HEAD detached at ...)", which isn't a branch
        if not name or name == "HEAD" or (name.startswith("(") and name.endswith(")")):
            continue
        if name not in names:
            names.append(name)

    if current in names:
        names.remove(current)
        names.insert(0, current)
    return names


def sort_semver_tags(tags: list[str]) -> list[str]:
    """Keep the tags that parse as versions, newest first."""
    versions: list[tuple[Version, str]] = []
    for tag in tags:
        try:
            versions.append((Version(tag), tag))
        except InvalidVersion:
            logger.debug("Skipping tag %r, not a version", tag)
    return [tag for _, tag in sorted(versions, key=lambda pair: pair[0], reverse=True)]


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Path) -> None:
        """Initialize repository.

        Raises:
            RepositoryNotFound: If path isn't within a git repository
            GitError: If the repository can't be opened
        """
        self.root = find_git_root(path)
        try:
            self.repo: Repo = Repo(self.root)
        except (GitCommandError, ValueError, InvalidGitRepositoryError) as err:
            raise GitError(f"Failed to open repository: {err}") from err

    def get_current_branch_name(self) -> str:
        """Get current branch name."""
        try:
            try:
                return self.repo.active_branch.name
            except TypeError:
                # Detached HEAD
                return ""
        except (GitCommandError, ValueError) as err:
            raise GitError(f"Failed to get current branch: {err}") from err

    def list_branch_names(self) -> list[str]:
        """Get local branch names with the current branch first."""
        try:
            # Plain names only, whatever color.branch or color.ui say
            output = self.repo.git.branch("--no-color", "--format=%(refname:short)")
        except GitCommandError as err:
            raise GitError(f"Failed to list branches: {err}") from err
        logger.debug("git branch output:\n%s", output)
        return parse_branch_listing(output, self.get_current_branch_name())

    def list_tags(self, only_semver: bool = False) -> list[str]:
        """Get tag names.

        Args:
            only_semver: Keep only tags that parse as versions, sorted newest first
        """
        try:
            output = self.repo.git.tag()
        except GitCommandError as err:
            raise GitError(f"Failed to list tags: {err}") from err
        tags = [tag.strip() for tag in output.splitlines() if tag.strip()]
        return sort_semver_tags(tags) if only_semver else tags

    def get_current_branch(
        self,
        strict: bool = False,
        factory: BranchFactory = parse_branch,
        branch_names: Optional[list[str]] = None,
    ) -> Optional[Branch]:
        """Get the current branch, or None in a detached HEAD or empty repository.

        Args:
            strict: Raise on names that don't follow the convention
            factory: Builds the branch from its name
            branch_names: An earlier list_branch_names() result, to skip listing again
        """
        if branch_names is None:
            branch_names = self.list_branch_names()
        current = self.get_current_branch_name()
        if not current or not branch_names or branch_names[0] != current:
            return None
        return make_branch(current, strict, factory)
