from datetime import datetime
from unittest.mock import MagicMock, patch

from packdash.models.admin import AppRole, UserRole


def _admin(user_id: str, role_id: int = 1) -> UserRole:
    return UserRole(id=role_id, user_id=user_id, role=AppRole.ADMIN, created_at=datetime(2026, 1, 5, 9, 30))


class TestAdminManagementMenu:
    @patch("packdash.cli.admin_menu.questionary")
    def test_back_exits(self, mock_q):
        from packdash.cli.admin_menu import admin_management_menu

        mock_q.select.return_value.ask.return_value = "Back"
        admin_management_menu(MagicMock())

    @patch("packdash.cli.admin_menu.questionary")
    def test_none_exits(self, mock_q):
        from packdash.cli.admin_menu import admin_management_menu

        mock_q.select.return_value.ask.return_value = None
        admin_management_menu(MagicMock())

    @patch("packdash.cli.admin_menu._grant_admin")
    @patch("packdash.cli.admin_menu.questionary")
    def test_route_grant(self, mock_q, mock_grant):
        from packdash.cli.admin_menu import admin_management_menu

        service = MagicMock()
        mock_q.select.return_value.ask.side_effect = ["Grant Admin", "Back"]
        admin_management_menu(service)
        mock_grant.assert_called_once_with(service)

    @patch("packdash.cli.admin_menu._revoke_admin")
    @patch("packdash.cli.admin_menu.questionary")
    def test_route_revoke(self, mock_q, mock_revoke):
        from packdash.cli.admin_menu import admin_management_menu

        service = MagicMock()
        mock_q.select.return_value.ask.side_effect = ["Revoke Admin", "Back"]
        admin_management_menu(service)
        mock_revoke.assert_called_once_with(service)

    @patch("packdash.cli.admin_menu._list_admins")
    @patch("packdash.cli.admin_menu.questionary")
    def test_route_list(self, mock_q, mock_list):
        from packdash.cli.admin_menu import admin_management_menu

        service = MagicMock()
        mock_q.select.return_value.ask.side_effect = ["List Admins", "Back"]
        admin_management_menu(service)
        mock_list.assert_called_once_with(service)


class TestGrantAdmin:
    @patch("packdash.cli.admin_menu.questionary")
    def test_grants_stripped_id(self, mock_q):
        from packdash.cli.admin_menu import _grant_admin

        service = MagicMock()
        mock_q.text.return_value.ask.return_value = "  user-1 "
        _grant_admin(service)
        service.grant_admin.assert_called_once_with("user-1")

    @patch("packdash.cli.admin_menu.questionary")
    def test_cancel(self, mock_q):
        from packdash.cli.admin_menu import _grant_admin

        service = MagicMock()
        mock_q.text.return_value.ask.return_value = ""
        _grant_admin(service)
        service.grant_admin.assert_not_called()


class TestRevokeAdmin:
    @patch("packdash.cli.admin_menu.questionary")
    def test_no_admins(self, mock_q):
        from packdash.cli.admin_menu import _revoke_admin

        service = MagicMock()
        service.list_admins.return_value = []
        _revoke_admin(service)
        mock_q.select.assert_not_called()

    @patch("packdash.cli.admin_menu.questionary")
    def test_revokes_after_confirm(self, mock_q):
        from packdash.cli.admin_menu import _revoke_admin

        service = MagicMock()
        service.list_admins.return_value = [_admin("user-1")]
        mock_q.select.return_value.ask.return_value = "user-1"
        mock_q.confirm.return_value.ask.return_value = True

        _revoke_admin(service)
        service.revoke_admin.assert_called_once_with("user-1")

    @patch("packdash.cli.admin_menu.questionary")
    def test_declined_confirm(self, mock_q):
        from packdash.cli.admin_menu import _revoke_admin

        service = MagicMock()
        service.list_admins.return_value = [_admin("user-1")]
        mock_q.select.return_value.ask.return_value = "user-1"
        mock_q.confirm.return_value.ask.return_value = False

        _revoke_admin(service)
        service.revoke_admin.assert_not_called()

    @patch("packdash.cli.admin_menu.questionary")
    def test_back(self, mock_q):
        from packdash.cli.admin_menu import _revoke_admin

        service = MagicMock()
        service.list_admins.return_value = [_admin("user-1")]
        mock_q.select.return_value.ask.return_value = "Back"

        _revoke_admin(service)
        service.revoke_admin.assert_not_called()


class TestListAdmins:
    @patch("packdash.cli.admin_menu.console")
    def test_prints_table(self, mock_console):
        from packdash.cli.admin_menu import _list_admins

        service = MagicMock()
        service.list_admins.return_value = [_admin("user-1"), _admin("user-2", 2)]
        _list_admins(service)

        from rich.table import Table

        tables = [c.args[0] for c in mock_console.print.call_args_list if c.args and isinstance(c.args[0], Table)]
        assert len(tables) == 1
        assert tables[0].row_count == 2

    @patch("packdash.cli.admin_menu.console")
    def test_empty(self, mock_console):
        from packdash.cli.admin_menu import _list_admins

        service = MagicMock()
        service.list_admins.return_value = []
        _list_admins(service)

        mock_console.print.assert_called_once()
