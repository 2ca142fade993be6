from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from packdash.services.admin_service import AdminService

console = Console()


def admin_management_menu(admin_service: AdminService) -> None:
    while True:
        choice = questionary.select(
            "Manage Admins",
            choices=[
                "List Admins",
                "Grant Admin",
                "Revoke Admin",
                "Back",
            ],
        ).ask()

        if choice is None or choice == "Back":
            break
        elif choice == "List Admins":
            _list_admins(admin_service)
        elif choice == "Grant Admin":
            _grant_admin(admin_service)
        elif choice == "Revoke Admin":
            _revoke_admin(admin_service)


def _grant_admin(admin_service: AdminService) -> None:
    user_id = questionary.text("User ID:").ask()
    if not user_id:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    admin_service.grant_admin(user_id.strip())
    console.print(f"[green bold]User '{user_id.strip()}' is now an admin.[/green bold]")


def _revoke_admin(admin_service: AdminService) -> None:
    admins = admin_service.list_admins()
    if not admins:
        console.print("[yellow]No admins registered.[/yellow]")
        return

    choices = [a.user_id for a in admins] + ["Back"]
    user_id = questionary.select("Select the user:", choices=choices).ask()
    if user_id is None or user_id == "Back":
        return

    if not questionary.confirm(f"Revoke admin from '{user_id}'?", default=False).ask():
        console.print("[yellow]Cancelled.[/yellow]")
        return

    admin_service.revoke_admin(user_id)
    console.print(f"[green bold]Admin role revoked from '{user_id}'.[/green bold]")


def _list_admins(admin_service: AdminService) -> None:
    admins = admin_service.list_admins()

    if not admins:
        console.print("[yellow]No admins registered.[/yellow]")
        return

    table = Table(title="Admins")
    table.add_column("#", style="dim")
    table.add_column("User ID", style="bold")
    table.add_column("Granted at")

    for a in admins:
        created = a.created_at.strftime("%Y-%m-%d %H:%M") if a.created_at else "-"
        table.add_row(str(a.id), a.user_id, created)

    console.print()
    console.print(table)
    console.print()
