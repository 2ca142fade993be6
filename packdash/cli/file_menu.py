from __future__ import annotations

import asyncio
from pathlib import Path

import questionary
from rich.console import Console

from packdash.services.file_service import FileService, make_upload_path
from packdash.storage.base import StorageError

console = Console()

GUESSED_CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def resolve_file_menu(file_service: FileService) -> None:
    console.print()
    console.print("[bold]Resolve File Link[/bold]", style="cyan")

    stored_value = questionary.text("Stored value (bucket:path, URL or path):").ask()
    if not stored_value:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    default_bucket = questionary.text("Default bucket (optional):").ask() or None

    result = asyncio.run(file_service.resolve(stored_value.strip(), default_bucket))
    if result.reference is not None:
        console.print(f"Bucket: [bold]{result.reference.bucket}[/bold]  Path: [bold]{result.reference.path}[/bold]")
    if result.ok:
        if result.passthrough:
            console.print("[yellow]External link, returned unchanged.[/yellow]")
        console.print(f"[green]{result.url}[/green]")
    else:
        console.print(f"[red]Could not access file ({result.error.value}).[/red]")


def upload_file_menu(file_service: FileService) -> None:
    console.print()
    console.print("[bold]Upload File[/bold]", style="cyan")

    local_path = questionary.path("Local file:").ask()
    if not local_path:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    source = Path(local_path).expanduser()
    if not source.is_file():
        console.print(f"[red]File not found: {source}[/red]")
        return

    bucket = questionary.text("Bucket:").ask()
    if not bucket:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    prefix = questionary.text("Folder inside the bucket (optional):").ask() or ""
    content_type = GUESSED_CONTENT_TYPES.get(source.suffix.lower(), "application/octet-stream")
    path = make_upload_path(prefix, source.name)

    try:
        reference = file_service.upload(bucket, path, source.read_bytes(), content_type=content_type)
    except StorageError as e:
        console.print(f"[red]Upload failed: {e}[/red]")
        return

    console.print(f"[green bold]Uploaded.[/green bold] Store this reference: [bold]{reference}[/bold]")
