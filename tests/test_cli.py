"""Tests for CLI argument parsing and commands."""

import json
import logging
import sys
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from heritagedesk.cli import load_detail_file, main, parse_arguments, print_draft_summary, setup_logging
from heritagedesk.client import ApiResult
from heritagedesk.exceptions import LoadError
from heritagedesk.models import FeeBreakup, SiteDraft, Ticketing


class TestParseArguments:
    """Tests for argument parsing."""

    def test_command_required(self) -> None:
        """Test a subcommand is required."""
        with patch.object(sys, "argv", ["heritagedesk"]):
            with pytest.raises(SystemExit):
                parse_arguments()

    def test_list_arguments(self) -> None:
        """Test list filters."""
        with patch.object(
            sys, "argv", ["heritagedesk", "list", "--search", "fort", "--status", "active"]
        ):
            args = parse_arguments()
            assert args.command == "list"
            assert args.search == "fort"
            assert args.status == "active"
            assert args.experience is None
            assert args.verbose is False

    def test_invalid_status(self) -> None:
        """Test unknown status values are rejected."""
        with patch.object(sys, "argv", ["heritagedesk", "list", "--status", "archived"]):
            with pytest.raises(SystemExit):
                parse_arguments()

    def test_export_arguments(self) -> None:
        """Test export site id and output file."""
        with patch.object(sys, "argv", ["heritagedesk", "export", "42", "-o", "out.json"]):
            args = parse_arguments()
            assert args.site_id == 42
            assert args.output == "out.json"

    def test_import_defaults(self) -> None:
        """Test import default flags."""
        with patch.object(sys, "argv", ["heritagedesk", "import", "site.json"]):
            args = parse_arguments()
            assert args.file == "site.json"
            assert args.site_id is None
            assert args.approve is False
            assert args.draft is False
            assert args.dry_run is False

    def test_import_approve_and_draft_exclusive(self) -> None:
        """Test --approve and --draft cannot be combined."""
        with patch.object(sys, "argv", ["heritagedesk", "import", "site.json", "--approve", "--draft"]):
            with pytest.raises(SystemExit):
                parse_arguments()

    def test_verbose_flag(self) -> None:
        """Test verbose flag."""
        with patch.object(sys, "argv", ["heritagedesk", "-v", "check", "site.json"]):
            args = parse_arguments()
            assert args.verbose is True


class TestSetupLogging:
    """Tests for logging setup."""

    def test_setup_logging_default(self) -> None:
        """Test default logging setup."""
        with patch("logging.basicConfig") as mock_config:
            setup_logging(verbose=False)
            mock_config.assert_called_once()

    def test_setup_logging_verbose(self) -> None:
        """Test verbose logging setup."""
        with patch("logging.basicConfig") as mock_config:
            setup_logging(verbose=True)
            assert mock_config.call_args[1]["level"] == logging.DEBUG


class TestLoadDetailFile:
    """Tests for reading detail files."""

    def test_missing_file(self, tmp_path) -> None:
        """Test a missing file raises LoadError."""
        with pytest.raises(LoadError):
            load_detail_file(str(tmp_path / "missing.json"))

    def test_not_an_object(self, tmp_path) -> None:
        """Test a JSON list is rejected."""
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(LoadError):
            load_detail_file(str(path))


@pytest.fixture
def detail_file(tmp_path, sample_detail: dict) -> str:
    path = tmp_path / "site.json"
    path.write_text(json.dumps(sample_detail), encoding="utf-8")
    return str(path)


@pytest.fixture
def mock_client():
    """Patch the client class and return the instance used by main()."""
    with patch("heritagedesk.cli.HeritageSiteClient") as mock_cls:
        client = MagicMock()
        mock_cls.return_value.__enter__.return_value = client
        yield client


@patch("heritagedesk.cli.console")
class TestMain:
    """Tests for the main entry point."""

    def test_check_incomplete(self, mock_console: MagicMock, detail_file: str) -> None:
        """Test check reports missing sections with exit code 2."""
        with patch.object(sys, "argv", ["heritagedesk", "check", detail_file]):
            assert main() == 2

    def test_check_unreadable(self, mock_console: MagicMock, tmp_path) -> None:
        """Test check fails cleanly on a missing file."""
        with patch.object(sys, "argv", ["heritagedesk", "check", str(tmp_path / "nope.json")]):
            assert main() == 1

    def test_list(self, mock_console: MagicMock, mock_client: MagicMock) -> None:
        """Test list passes filters to the client."""
        mock_client.list_sites.return_value = ApiResult(success=True, data=[{"site_id": 1, "name_default": "Hampi"}])
        with patch.object(sys, "argv", ["heritagedesk", "list", "--search", "ham"]):
            assert main() == 0
        filters = mock_client.list_sites.call_args[0][0]
        assert filters.search == "ham"

    def test_list_failure(self, mock_console: MagicMock, mock_client: MagicMock) -> None:
        """Test list failures give exit code 1."""
        mock_client.list_sites.return_value = ApiResult(success=False, error="timeout")
        with patch.object(sys, "argv", ["heritagedesk", "list"]):
            assert main() == 1

    def test_export(self, mock_console: MagicMock, mock_client: MagicMock, sample_detail: dict, tmp_path) -> None:
        """Test export writes the detail aggregate."""
        mock_client.get_site_detail.return_value = ApiResult(success=True, data=sample_detail)
        output = tmp_path / "out.json"
        with patch.object(sys, "argv", ["heritagedesk", "export", "42", "-o", str(output)]):
            assert main() == 0
        assert json.loads(output.read_text(encoding="utf-8"))["site"]["site_id"] == 42

    def test_import_dry_run(self, mock_console: MagicMock, mock_client: MagicMock, detail_file: str) -> None:
        """Test a dry run prints the request without sending it."""
        with patch.object(sys, "argv", ["heritagedesk", "import", detail_file, "--dry-run"]):
            assert main() == 0
        mock_client.create_site.assert_not_called()
        mock_client.update_site.assert_not_called()
        request = mock_console.print_json.call_args[1]["data"]
        assert request["site"]["name_default"] == "Rani ki Vav"

    def test_import_creates(self, mock_console: MagicMock, mock_client: MagicMock, detail_file: str) -> None:
        """Test import without a site id creates a new draft site."""
        mock_client.create_site.return_value = ApiResult(success=True, data={"site_id": 77})
        with patch.object(sys, "argv", ["heritagedesk", "import", detail_file, "--draft"]):
            assert main() == 0
        request = mock_client.create_site.call_args[0][0]
        assert request["site"]["status"] == "draft"
        mock_client.update_site.assert_not_called()

    def test_import_updates(self, mock_console: MagicMock, mock_client: MagicMock, detail_file: str) -> None:
        """Test import with a site id updates that site."""
        mock_client.update_site.return_value = ApiResult(success=True, data=None)
        with patch.object(sys, "argv", ["heritagedesk", "import", detail_file, "--site-id", "9"]):
            assert main() == 0
        assert mock_client.update_site.call_args[0][0] == 9

    def test_import_rejected(self, mock_console: MagicMock, mock_client: MagicMock, detail_file: str) -> None:
        """Test a rejected import gives exit code 1."""
        mock_client.create_site.return_value = ApiResult(success=False, error="Duplicate name")
        with patch.object(sys, "argv", ["heritagedesk", "import", detail_file]):
            assert main() == 1


class TestRendering:
    """Tests for console rendering of site data."""

    def test_markup_in_site_data_shown_literally(self) -> None:
        """Test brackets in site names and fees are printed as text."""
        recorder = Console(record=True, width=120)
        draft = SiteDraft(
            name="[bold]Amber Fort",
            ticketing=Ticketing(entry_type="paid", fees=[FeeBreakup(visitor_type="[red]Adult", amount=100)]),
        )
        with patch("heritagedesk.cli.console", recorder):
            print_draft_summary(draft)
        output = recorder.export_text()
        assert "[bold]Amber Fort" in output
        assert "[red]Adult: 100" in output
