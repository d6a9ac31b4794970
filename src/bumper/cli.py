"""Command line interface for bumper."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import print
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from bumper.branch import Branch, BranchError, BranchType, children_of, parse_branch
from bumper.git import GitError, GitRepo

app = typer.Typer(help="Branch naming convention tool")
console = Console()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

TYPE_DISPLAY = {
    BranchType.RELEASE: "[green]release[/green]",
    BranchType.FEATURE: "[cyan]feature[/cyan]",
    BranchType.BUGFIX: "[red]bug fix[/red]",
    BranchType.UNKNOWN: "[dim]unknown[/dim]",
}


def get_repo(path: Path) -> GitRepo:
    """Get git repository instance."""
    try:
        return GitRepo(path)
    except GitError as err:
        print(f"Error: {err}")
        raise typer.Exit(code=1) from err


def format_date(date: int) -> str:
    """Format a YYMMDD integer as 20YY-MM-DD."""
    return f"20{date // 10000:02d}-{date // 100 % 100:02d}-{date % 100:02d}"


def flag(value: bool) -> str:
    return "[green]yes[/green]" if value else "[dim]no[/dim]"


def describe_branch(branch: Branch, all_branch_names: Optional[list[str]] = None) -> Panel:
    """Build a panel with everything the branch name encodes."""
    lines = [
        f"Type:        {TYPE_DISPLAY[branch.type]}",
        f"Date:        {format_date(branch.date)}",
        f"Description: {escape(branch.description)}",
        f"Parent:      {escape(branch.parent) or '[dim]none[/dim]'}",
        f"Child?       {flag(branch.is_child())}",
    ]
    if all_branch_names is not None:
        lines.append(f"Parent?      {flag(branch.is_parent(all_branch_names))}")
        for child in children_of(branch, all_branch_names):
            lines.append(f"  [blue]{escape(child)}[/blue]")

    return Panel(
        "\n".join(lines),
        title=escape(branch.name),
        title_align="left",
        padding=(0, 2),
        expand=False,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Parse and classify branch names."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)


@app.command()
def parse(
    name: Annotated[str, typer.Argument(help="Branch name to parse")],
    strict: bool = typer.Option(False, "--strict", "-s", help="Fail on names that don't follow the convention"),
) -> None:
    """Show what a branch name encodes."""
    try:
        branch = parse_branch(name, strict)
    except BranchError as err:
        print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(code=1) from err
    console.print(describe_branch(branch))


@app.command()
def current(
    path: Annotated[Path, typer.Option(help="Path to git repository")] = Path("."),
    strict: bool = typer.Option(False, "--strict", "-s", help="Fail on names that don't follow the convention"),
) -> None:
    """Show what the current branch name encodes."""
    repo = get_repo(path)

    try:
        branch_names = repo.list_branch_names()
        branch = repo.get_current_branch(strict, branch_names=branch_names)
    except (GitError, BranchError) as err:
        print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(code=1) from err

    if branch is None:
        print("[yellow]Not on a branch[/yellow]")
        raise typer.Exit(code=1)

    console.print(describe_branch(branch, branch_names))


@app.command()
def branches(
    path: Annotated[Path, typer.Option(help="Path to git repository")] = Path("."),
) -> None:
    """List all branches with what their names encode."""
    repo = get_repo(path)

    try:
        branch_names = repo.list_branch_names()
        current_name = repo.get_current_branch_name()
    except GitError as err:
        print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(code=1) from err

    table = Table(
        title="Branches",
        show_header=True,
        header_style="bold",
        title_style="bold blue",
        show_edge=True,
    )
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Type", justify="center", no_wrap=True)
    table.add_column("Date", style="yellow", no_wrap=True)
    table.add_column("Parent", style="blue", no_wrap=True)
    table.add_column("Child?", justify="center", no_wrap=True)
    table.add_column("Parent?", justify="center", no_wrap=True)

    for name in branch_names:
        try:
            branch = parse_branch(name, strict=False)
        except BranchError:
            # Follows the convention but the date is out of range
            table.add_row(escape(name), "[red]invalid[/red]", "", "", "", "")
            continue

        display_name = escape(name)
        if name == current_name:
            display_name = f"{display_name} [turquoise2](current)[/turquoise2]"

        table.add_row(
            display_name,
            TYPE_DISPLAY[branch.type],
            format_date(branch.date),
            escape(branch.parent),
            flag(branch.is_child()),
            flag(branch.is_parent(branch_names)),
        )

    console.print(table)


@app.command()
def tags(
    path: Annotated[Path, typer.Option(help="Path to git repository")] = Path("."),
    semver: bool = typer.Option(False, "--semver", help="Only version tags, newest first"),
) -> None:
    """List tags."""
    repo = get_repo(path)

    try:
        tag_names = repo.list_tags(only_semver=semver)
    except GitError as err:
        print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(code=1) from err

    if not tag_names:
        console.print("[yellow]No tags found[/yellow]")
        return
    for tag in tag_names:
        console.print(escape(tag), highlight=False)


if __name__ == "__main__":
    app()
