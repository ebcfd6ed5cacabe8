"""Tests for file loading and environment-layered settings."""

import json
import shutil
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "packages" / "core_engine" / "src"))

from appdef_core import DocumentFormatError, load_applications, load_view_catalog, load_yaml_document
from appdef_core.settings import overlay_paths, resolve_environment, resolve_log_level

FIXTURES = Path(__file__).resolve().parent / "fixtures"


class TestApplicationSettings:
    def test_reads_applications_section(self):
        apps = load_applications(str(FIXTURES / "appsettings.json"))
        assert [app.name for app in apps] == ["admin", "reporting", "metrics", "public"]

        admin = apps[0]
        assert admin.title == "Administration"
        assert admin.schema == "acme"
        assert admin.icon == "admin_panel_settings"
        assert admin.entities == ["acme:Category", "acme:Product", "acme:CompanyProduct"]
        assert admin.views is None
        assert admin.theme.primary_color == "#1f2937"
        assert admin.theme.background_color is None
        assert admin.extra == {"SpaSections": ["Dashboard", "Settings"]}

    def test_section_key_is_case_insensitive(self, tmp_path):
        settings = tmp_path / "appsettings.json"
        settings.write_text(json.dumps({"applications": [{"name": "admin"}]}), encoding="utf-8")
        assert [app.name for app in load_applications(str(settings))] == ["admin"]

    def test_missing_section_is_empty(self, tmp_path):
        settings = tmp_path / "appsettings.json"
        settings.write_text(json.dumps({"Logging": {}}), encoding="utf-8")
        assert load_applications(str(settings)) == []

    def test_yaml_settings(self, tmp_path):
        settings = tmp_path / "appsettings.yaml"
        settings.write_text("Applications:\n  - Name: admin\n    Schema: acme\n", encoding="utf-8")
        apps = load_applications(str(settings))
        assert (apps[0].name, apps[0].schema) == ("admin", "acme")

    def test_overlay_replaces_applications(self):
        base = FIXTURES / "appsettings.json"
        apps = load_applications(str(base), overlays=overlay_paths(str(base), "Staging"))
        assert [app.name for app in apps] == ["staging-admin"]

    def test_missing_overlay_is_ignored(self):
        base = FIXTURES / "appsettings.json"
        apps = load_applications(str(base), overlays=overlay_paths(str(base), "Production"))
        assert len(apps) == 4

    def test_invalid_json(self, tmp_path):
        settings = tmp_path / "appsettings.json"
        settings.write_text("{ not json", encoding="utf-8")
        with pytest.raises(DocumentFormatError) as excinfo:
            load_applications(str(settings))
        assert isinstance(excinfo.value.__cause__, json.JSONDecodeError)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Settings file not found"):
            load_applications(str(tmp_path / "nope.json"))


class TestDocumentFiles:
    def test_snake_case_views_file(self):
        catalog = load_view_catalog(str(FIXTURES / "views.yaml"))
        assert [view.name for view in catalog.views] == [
            "SystemHealthView",
            "SalesReportView",
            "PublicStatsView",
            "AllDataView",
        ]
        health = catalog.views[0]
        assert health.sql_file == "sql/views/SystemHealthView.sql"
        assert health.generate_partial is False
        assert health.properties[0].max_length == 100

        top_n = catalog.views[1].parameters[0]
        assert (top_n.name, top_n.type, top_n.default) == ("TopN", "int", "10")
        assert top_n.validation.required is True
        assert top_n.validation.range == [1, 1000]
        assert top_n.validation.error_message == "TopN must be between 1 and 1000"

        assert catalog.views[2].extra == {"refresh_interval": 300}

    def test_missing_document(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Definition file not found"):
            load_yaml_document(str(tmp_path / "data.yaml"))

    def test_load_document_file(self, tmp_path):
        shutil.copy(FIXTURES / "views.yaml", tmp_path / "data.yaml")
        assert load_yaml_document(str(tmp_path / "data.yaml")).view_count() == 4


class TestEnvironment:
    def test_explicit_environment_wins(self):
        assert resolve_environment("Staging", env={"APPDEF_ENVIRONMENT": "Production"}) == "Staging"

    def test_environment_variable_order(self):
        env = {"ASPNETCORE_ENVIRONMENT": "Development", "DOTNET_ENVIRONMENT": "Test"}
        assert resolve_environment(None, env=env) == "Development"
        assert resolve_environment(None, env={"APPDEF_ENVIRONMENT": "Prod", **env}) == "Prod"
        assert resolve_environment(None, env={}) == ""

    def test_overlay_paths(self):
        assert overlay_paths("config/appsettings.json", "Staging") == [str(Path("config/appsettings.Staging.json"))]
        assert overlay_paths("config/appsettings.json", "") == []

    def test_log_level(self):
        assert resolve_log_level(verbose=True, env={"APPDEF_LOG_LEVEL": "ERROR"}) == "DEBUG"
        assert resolve_log_level(env={"APPDEF_LOG_LEVEL": "info"}) == "INFO"
        assert resolve_log_level(env={}) == "WARNING"
