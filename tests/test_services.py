import io

import pytest

import cafe.services.notifications as notifications
import cafe.services.sheets as sheets
from cafe.core.config import Settings
from cafe.services.notifications import ConsoleNotifier, MockNotifier, get_notifier, reset_notifier
from cafe.services.sheets import AppsScriptGateway, WorkbookGateway, get_sheets_gateway, reset_sheets_gateway


@pytest.fixture()
def env_mode(monkeypatch):
    def _use(mode):
        settings = Settings(_env_file=None, env_mode=mode)
        monkeypatch.setattr(notifications, "get_settings", lambda: settings)
        monkeypatch.setattr(sheets, "get_settings", lambda: settings)
        reset_notifier()
        reset_sheets_gateway()

    yield _use
    reset_notifier()
    reset_sheets_gateway()


def test_development_uses_local_services(env_mode):
    env_mode("development")

    assert isinstance(get_notifier(), MockNotifier)
    assert isinstance(get_sheets_gateway(), WorkbookGateway)
    assert get_sheets_gateway() is get_sheets_gateway()


def test_production_uses_real_services(env_mode):
    env_mode("production")

    assert isinstance(get_notifier(), ConsoleNotifier)
    assert isinstance(get_sheets_gateway(), AppsScriptGateway)


def test_console_notifier_output():
    stream = io.StringIO()
    notifier = ConsoleNotifier(stream=stream, bell=False)

    notifier.new_order_cue()
    notifier.error("Failed to update order: boom")
    notifier.success("Order sent!")

    assert stream.getvalue().splitlines() == [
        "🔔 New order received",
        "❌ Failed to update order: boom",
        "✅ Order sent!",
    ]


def test_production_config_reports_missing_keys():
    settings = Settings(_env_file=None, env_mode="production", google_script_url="", order_sheet_id="x")

    assert settings.validate_production_config() == ["GOOGLE_SCRIPT_URL", "MENU_SHEET_ID"]
    assert Settings(_env_file=None, env_mode="development").validate_production_config() == []
