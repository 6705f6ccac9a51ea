"""Upload command for wallsync."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

import click

from wallsync.cli.common import Context, global_options, handle_errors
from wallsync.core.exceptions import BatchOperationError, ValidationError
from wallsync.core.output import (
    OutputFormat,
    RecordingNotifier,
    create_progress,
    print_info,
    print_output,
)
from wallsync.core.validation import validate_positive_int
from wallsync.models.progress import BatchRun, OperationPhase, UploadProgress
from wallsync.models.upload import UploadCandidate
from wallsync.uploaders.destinations import object_key, resolve_destination
from wallsync.uploaders.pipeline import BatchUploadPipeline
from wallsync.uploaders.selection import FileSelection
from wallsync.uploaders.validation import ValidationRules

RESULT_COLUMNS = ["file", "status", "progress", "url", "error"]


def expand_paths(paths: tuple[str, ...]) -> list[Path]:
    """Expand directories into their visible files, keeping argument order."""
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(
                sorted(p for p in path.iterdir() if p.is_file() and not p.name.startswith("."))
            )
        else:
            files.append(path)
    return files


def task_rows(run: BatchRun) -> list[dict[str, Any]]:
    return [
        {
            "file": task.file_name,
            "status": task.status.value,
            "progress": f"{task.progress_percent}%",
            "url": task.public_url,
            "error": task.error_detail,
        }
        for task in run.tasks
    ]


@click.command("upload")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--category", help="Category or brand (see 'wallsync destinations')")
@click.option("--subcategory", help="Subcategory or device series")
@click.option("--dir", "directory", help="Explicit bucket directory (overrides category)")
@click.option("--accept", help="Accepted MIME patterns, comma-separated")
@click.option("--max-size-mb", type=int, help="Per-file size limit in MB")
@click.option("--max-files", type=int, help="Maximum files per selection")
@click.option("--single", is_flag=True, help="Allow only one file")
@click.option("--dry-run", is_flag=True, help="Show destination keys without uploading")
@global_options
@handle_errors
def upload(
    ctx: Context,
    paths: tuple[str, ...],
    category: Optional[str],
    subcategory: Optional[str],
    directory: Optional[str],
    accept: Optional[str],
    max_size_mb: Optional[int],
    max_files: Optional[int],
    single: bool,
    dry_run: bool,
) -> None:
    """Upload image files to the wallpaper bucket.

    Files are validated, de-duplicated by name and size, then uploaded in
    spaced batches. Existing objects are skipped.

    Example:
        wallsync upload ./new/*.jpg --category "Nature & Landscapes" --subcategory Mountains
        wallsync upload ./pixel --category Google --subcategory "Pixel 9" --dry-run
    """
    profile = ctx.get_profile()
    notifier = ctx.get_notifier()

    limits = replace(
        profile,
        max_size_mb=validate_positive_int(
            profile.max_size_mb if max_size_mb is None else max_size_mb, "max_size_mb"
        ),
    )
    rules = ValidationRules.from_accept(
        accept or profile.accept,
        max_size_bytes=limits.max_size_bytes,
        allow_multiple=not single,
        max_files=validate_positive_int(
            profile.max_files if max_files is None else max_files, "max_files"
        ),
    )
    target = directory or resolve_destination(category, subcategory)

    selection = FileSelection(rules, notifier)
    selection.add(expand_paths(paths))
    candidates = selection.candidates
    if not candidates:
        raise ValidationError("No files to upload")

    if dry_run:
        _print_plan(ctx, target, candidates)
        return

    with ctx.get_presign_client() as presign, ctx.get_store() as store:
        pipeline = BatchUploadPipeline(presign, store, notifier)

        if ctx.output_format == OutputFormat.JSON or ctx.quiet:
            run = pipeline.run(candidates, target)
        else:
            print_info(f"Uploading {len(candidates)} file(s) to {target}")
            with create_progress() as progress:
                bar = progress.add_task("Uploading...", total=len(candidates))

                def on_progress(update: UploadProgress) -> None:
                    description = update.message or "Uploading..."
                    if update.phase is OperationPhase.UPLOADING:
                        progress.update(bar, completed=update.current, description=description)
                    else:
                        progress.update(bar, description=description)

                run = pipeline.run(candidates, target, on_progress)

    selection.mark_completed(c for c, task in zip(candidates, run.tasks) if task.succeeded)
    _print_run(ctx, target, run)

    if run.failed:
        raise BatchOperationError("upload", run.succeeded, run.failed, run.errors)


def _print_plan(ctx: Context, target: str, candidates: list[UploadCandidate]) -> None:
    rows = [
        {
            "file": c.name,
            "size": c.size,
            "type": c.mime_type,
            "key": object_key(target, c.name, c.content_type),
        }
        for c in candidates
    ]
    print_output(
        rows,
        format=ctx.output_format,
        columns=["file", "size", "type", "key"],
        title=f"Dry run: {target}",
        quiet=ctx.quiet,
        id_field="key",
    )


def _print_run(ctx: Context, target: str, run: BatchRun) -> None:
    rows = task_rows(run)
    if ctx.output_format == OutputFormat.JSON and not ctx.quiet:
        notifier = ctx.get_notifier()
        print_output(
            {
                "directory": target,
                "total": run.total,
                "processed": run.processed,
                "succeeded": run.succeeded,
                "skipped": run.skipped,
                "failed": run.failed,
                "success_rate": round(run.success_rate, 1),
                "batch_size": run.batch_size,
                "batches": run.batches,
                "duration": round(run.duration, 2),
                "tasks": rows,
                "notifications": (
                    notifier.to_list() if isinstance(notifier, RecordingNotifier) else []
                ),
            },
            format=OutputFormat.JSON,
        )
        return

    print_output(
        rows,
        format=ctx.output_format,
        columns=RESULT_COLUMNS,
        title=f"Upload to {target}",
        quiet=ctx.quiet,
        id_field="url",
    )
