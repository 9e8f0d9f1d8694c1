"""The `git-clean branches` command."""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from git_clean.cli.output import user_output
from git_clean.core.context import CleanContext
from git_clean.core.errors import FatalCleanError, format_error_chain
from git_clean.core.orchestrator import CleanReport, clean_branches


def _build_summary_table(report: CleanReport) -> Table:
    deleted = set(report.deleted)
    failed_deletions = {failure.branch_name: failure for failure in report.deletion_failures}

    rows: list[tuple[str, str, str, str]] = []
    for verdict in report.verdicts:
        if not verdict.should_delete:
            rows.append((verdict.branch_name, "retain", "green", verdict.reason))
        elif report.dry_run:
            rows.append((verdict.branch_name, "would delete", "yellow", verdict.reason))
        elif verdict.branch_name in deleted:
            rows.append((verdict.branch_name, "deleted", "red", verdict.reason))
        else:
            failure = failed_deletions.get(verdict.branch_name)
            reason = failure.message if failure is not None else verdict.reason
            rows.append((verdict.branch_name, "delete failed", "magenta", reason))
    for failure in report.evaluation_failures:
        rows.append((failure.branch_name, "skipped", "magenta", failure.message))

    table = Table(title=report.repository.full_name, show_header=True, header_style="bold")
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Action")
    table.add_column("Reason")
    # Text cells: branch names and error messages may contain rich markup characters
    for branch_name, action, style, reason in sorted(rows):
        table.add_row(Text(branch_name), Text(action, style=style), Text(reason))
    return table


def _print_report(report: CleanReport) -> None:
    if report.default_branch is None:
        user_output(
            click.style("Warning: ", fg="yellow")
            + "could not determine the default branch; it is protected only by its pull requests"
        )

    if report.dry_run:
        for branch_name in report.branches_to_delete:
            user_output(f"[DRY RUN] Would run: git branch -D {branch_name}")

    Console(stderr=True).print(_build_summary_table(report))

    if report.dry_run:
        count = len(report.branches_to_delete)
        user_output(f"{count} branch(es) would be deleted (dry run)")
    else:
        user_output(f"Deleted {len(report.deleted)} branch(es)")
    if report.failures:
        user_output(
            click.style(f"{len(report.failures)} branch(es) failed", fg="yellow")
            + "; see the log above"
        )


@click.command("branches")
@click.option("-n", "--dry-run", is_flag=True, help="Do not actually edit the repository.")
@click.option(
    "-T",
    "--personal-access-token",
    default=None,
    help=(
        "Use and cache a GitHub personal access token. This must be a 'classic' "
        "token with at least `repo` and `read:org` permissions; create one at "
        "https://github.com/settings/tokens."
    ),
)
@click.option(
    "-j",
    "--jobs",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of branches evaluated at once (default: all of them).",
)
@click.argument("path", type=click.Path(path_type=Path), default=Path("."))
@click.pass_obj
def branches_cmd(
    ctx: CleanContext,
    dry_run: bool,
    personal_access_token: str | None,
    jobs: int | None,
    path: Path,
) -> None:
    """Remove local branches whose pull requests are all closed.

    A branch is deleted when it was pushed, at least one pull request was
    opened from it, and every such pull request is now closed (merged or
    not). Branches never pushed, pushed without a pull request, with an open
    pull request, or set as the repository's default branch are kept.
    """
    if personal_access_token is not None:
        ctx = ctx.with_token(personal_access_token)
        user_output(f"Cached personal access token in {ctx.config_store.path()}")

    repo_path = path if path.is_absolute() else ctx.cwd / path

    try:
        report = clean_branches(
            ctx.git,
            ctx.create_github(),
            repo_path,
            dry_run=dry_run,
            max_workers=jobs,
        )
    except (FatalCleanError, RuntimeError) as e:
        # RuntimeError: git itself failed (not installed, corrupt repository)
        user_output(click.style("Error: ", fg="red") + format_error_chain(e))
        raise SystemExit(1) from e

    _print_report(report)
