import questionary
from rich.console import Console

from packdash.cli.admin_menu import admin_management_menu
from packdash.cli.file_menu import resolve_file_menu, upload_file_menu
from packdash.repositories.factory import get_role_repository
from packdash.services.admin_service import AdminService
from packdash.services.file_service import FileService
from packdash.storage.factory import get_storage

console = Console()


def _build_services() -> tuple[FileService, AdminService]:
    return (
        FileService(get_storage()),
        AdminService(get_role_repository()),
    )


def main_menu() -> None:
    file_service, admin_service = _build_services()

    console.print()
    console.print("[bold]Packaging Dashboard[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Main Menu",
            choices=[
                "Resolve File Link",
                "Upload File",
                "Manage Admins",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Bye![/bold]")
            break
        elif choice == "Resolve File Link":
            resolve_file_menu(file_service)
        elif choice == "Upload File":
            upload_file_menu(file_service)
        elif choice == "Manage Admins":
            admin_management_menu(admin_service)
