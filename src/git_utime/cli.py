"""CLI for git-utime."""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import typer
from rich.console import Console
from rich.markup import escape
from typer.core import TyperCommand

from . import __version__
from .config import load_utime_config
from .core import DiffMode, select_diff_mode
from .errors import UtimeError
from .ops import get_worktree_root, utime_all
from .repository import GitRepository


app = typer.Typer(
    help="""\
Set the access and modification times of tracked, unmodified files to the
time of the last commit that touched them, and of each directory to the most
recent time beneath it.""",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

# ctx.meta key holding the arguments as given, before option parsing
RAW_ARGS = "git_utime.raw_args"

LONG_MERGE_SWITCHES = {
    "--combined": (DiffMode.COMBINED, True),
    "--no-combined": (DiffMode.COMBINED, False),
    "--per-parent": (DiffMode.PER_PARENT, True),
    "--no-per-parent": (DiffMode.PER_PARENT, False),
}
SHORT_MERGE_SWITCHES = {
    "c": (DiffMode.COMBINED, True),
    "m": (DiffMode.PER_PARENT, True),
}


class UtimeCommand(TyperCommand):
    """Command that keeps its raw arguments in ``ctx.meta``.

    Option parsing collapses a repeated flag into its last value; the merge
    switches need every occurrence, in order.
    """

    def parse_args(self, ctx, args):
        ctx.meta[RAW_ARGS] = list(args)
        return super().parse_args(ctx, args)


def merge_switches(args: Sequence[str]) -> List[Tuple[DiffMode, bool]]:
    """Return every merge switch in ``args``, in command-line order.

    Short flags may be grouped (``-rc``). Scanning stops at ``--``.
    """
    switches = []
    for arg in args:
        if arg == "--":
            break
        if arg in LONG_MERGE_SWITCHES:
            switches.append(LONG_MERGE_SWITCHES[arg])
        elif arg.startswith("-") and not arg.startswith("--"):
            for flag in arg[1:]:
                if flag in SHORT_MERGE_SWITCHES:
                    switches.append(SHORT_MERGE_SWITCHES[flag])
    return switches


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"git-utime {__version__}", highlight=False)
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command(cls=UtimeCommand)
def utime(
    ctx: typer.Context,
    path: Path = typer.Argument(Path("."), help="Any path inside the worktree (default: current directory)"),
    recurse: Optional[bool] = typer.Option(
        None, "--recurse/--no-recurse", "-r",
        help="Recurse into submodules (default: from .git-utime.yaml, else no).",
    ),
    combined: bool = typer.Option(
        False, "--combined/--no-combined", "-c",
        help="Pass -c to git log: a merge touches files that differ from all parents.",
    ),
    per_parent: bool = typer.Option(
        False, "--per-parent/--no-per-parent", "-m",
        help="Pass -m to git log: a merge touches files that differ from any parent.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log git commands and details to stderr."),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
):
    """Restore file and directory times from git history.

    Merge switches apply in the order given, starting from the configured
    mode; a later switch wins.

    Example:
        git-utime -r --combined
    """
    _configure_logging(verbose)

    try:
        repo = GitRepository()
        root = get_worktree_root(path, repo)

        config = load_utime_config(root)
        if recurse is not None:
            config.recurse = recurse
        for mode, enabled in merge_switches(ctx.meta.get(RAW_ARGS, [])):
            config.diff_mode = select_diff_mode(config.diff_mode, mode, enabled)

        utime_all(root, config, repo=repo)
    except UtimeError as e:
        err_console.print(f"[red]error:[/red] {escape(str(e))}", highlight=False, soft_wrap=True)
        raise typer.Exit(e.exit_code)


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
