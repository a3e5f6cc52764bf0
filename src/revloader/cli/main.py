"""
CLI commands for the revision loader.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from ..config import LoaderSettings, get_config
from ..models import LoadingStarted, LoadingStep, ReferenceType
from ..repo_loader import GitRepoLoader
from ..utils import setup_logging

app = typer.Typer(name="revloader", help="Read-only Git history loader")
console = Console()


def _settings_for(path: Path, show_all: Optional[bool]) -> LoaderSettings:
    settings = get_config()
    update = {"repo_path": str(path)}
    if show_all is not None:
        update["show_all"] = show_all
    return settings.model_copy(update=update)


def _run_load(settings: LoaderSettings, timeout: float, show_progress: bool) -> GitRepoLoader:
    setup_logging(settings.logging)
    loader = GitRepoLoader.from_settings(settings)

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
        disable=not show_progress,
    ) as progress:
        task = progress.add_task("Loading revisions", total=None)

        def on_event(event):
            if isinstance(event, LoadingStarted):
                progress.update(task, total=event.total)
            elif isinstance(event, LoadingStep):
                progress.update(task, completed=event.index)

        loader.add_listener(on_event)

        if not loader.load_repository():
            console.print(f"[red]Error: {loader.last_error}[/red]")
            raise typer.Exit(1)

        if not loader.wait(timeout):
            loader.cancel_all()
            console.print(f"[red]Error: loading did not finish within {timeout:.0f}s[/red]")
            raise typer.Exit(1)

    return loader


@app.command()
def load(
    path: Path = typer.Argument(Path("."), help="Directory inside the repository"),
    show_all: Optional[bool] = typer.Option(None, "--all/--branch-only", help="Load every ref or only the current branch"),
    as_json: bool = typer.Option(False, "--json", help="Print the cache contents as JSON"),
    timeout: float = typer.Option(300.0, "--timeout", "-t", help="Seconds to wait for the load to finish"),
):
    """Load a repository and summarize the revision cache."""
    loader = _run_load(_settings_for(path, show_all), timeout, show_progress=not as_json)
    cache = loader.cache

    if as_json:
        typer.echo(json.dumps(cache.snapshot(), indent=2))
        return

    commits = [c for c in cache.commits() if not c.is_wip]
    summary = Table(title=f"Repository {loader.git.get_working_dir()}", show_header=False)
    summary.add_row("Current branch", loader.git.current_branch or "(detached)")
    head = cache.get_commit_info(cache.head_sha)
    summary.add_row("HEAD", head.short_sha if head else "-")
    summary.add_row("Commits", str(len(commits)))
    summary.add_row("Local branches", str(len(cache.get_references(ReferenceType.LOCAL_BRANCH))))
    summary.add_row("Remote branches", str(len(cache.get_references(ReferenceType.REMOTE_BRANCH))))
    summary.add_row("Tags", str(len(cache.get_references(ReferenceType.TAG))))
    summary.add_row("Untracked files", str(len(cache.untracked_files)))
    console.print(summary)

    distances = cache.local_branch_distances()
    if distances:
        table = Table(title="Local branches")
        table.add_column("Branch")
        table.add_column("Ahead master", justify="right")
        table.add_column("Behind master", justify="right")
        table.add_column("Ahead origin", justify="right")
        table.add_column("Behind origin", justify="right")
        for name, d in sorted(distances.items()):
            table.add_row(name, str(d.ahead_master), str(d.behind_master), str(d.ahead_origin), str(d.behind_origin))
        console.print(table)


@app.command()
def refs(
    path: Path = typer.Argument(Path("."), help="Directory inside the repository"),
    timeout: float = typer.Option(300.0, "--timeout", "-t", help="Seconds to wait for the load to finish"),
):
    """List the classified references of a repository."""
    loader = _run_load(_settings_for(path, None), timeout, show_progress=False)

    table = Table(title="References")
    table.add_column("Type")
    table.add_column("Name")
    table.add_column("Commit")
    for reference in sorted(loader.cache.get_references(), key=lambda r: (r.type.value, r.name)):
        table.add_row(reference.type.value, reference.name, reference.sha[:8])
    console.print(table)


if __name__ == "__main__":
    app()
