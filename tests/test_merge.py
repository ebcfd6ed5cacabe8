"""Tests for configuration merge and view-visibility resolution."""

import copy
import sys
import unittest
from pathlib import Path

import pytest
import yaml

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "packages" / "core_engine" / "src"))

from appdef_core import (
    AppDefinition,
    ApplicationDescriptor,
    DataModel,
    Entity,
    ViewCatalog,
    ViewDescriptor,
    build_definition,
    load_document,
    merge_applications,
    merge_view_catalog,
    populate_view_visibility,
)


def _applications():
    return [
        ApplicationDescriptor(name="admin", title="Admin", schema="acme"),
        ApplicationDescriptor(name="reporting", title="Reporting", schema="acme"),
        ApplicationDescriptor(name="metrics", title="Metrics", schema="acme"),
        ApplicationDescriptor(name="public", title="Public", schema="acme"),
    ]


def _catalog():
    return ViewCatalog(
        views=[
            ViewDescriptor(name="SystemHealthView", applications=["admin", "metrics"]),
            ViewDescriptor(name="SalesReportView", applications=["admin", "reporting"]),
            ViewDescriptor(name="PublicStatsView", applications=["public"]),
            ViewDescriptor(name="AllDataView", applications=["admin", "reporting", "metrics", "public"]),
        ]
    )


def _views_by_app(definition):
    return {app.name: app.views for app in definition.applications}


class TestVisibilityResolution:
    def test_many_to_many_distribution(self):
        definition = AppDefinition(applications=_applications(), views=_catalog())
        populate_view_visibility(definition)
        assert _views_by_app(definition) == {
            "admin": ["SystemHealthView", "SalesReportView", "AllDataView"],
            "reporting": ["SalesReportView", "AllDataView"],
            "metrics": ["SystemHealthView", "AllDataView"],
            "public": ["PublicStatsView", "AllDataView"],
        }

    def test_preexisting_view_not_duplicated(self):
        apps = _applications()
        apps[0].views = ["AllDataView"]
        definition = AppDefinition(applications=apps, views=_catalog())
        populate_view_visibility(definition)
        assert definition.applications[0].views == ["AllDataView", "SystemHealthView", "SalesReportView"]

    def test_resolution_is_idempotent(self):
        definition = AppDefinition(applications=_applications(), views=_catalog())
        populate_view_visibility(definition)
        first = copy.deepcopy(_views_by_app(definition))
        populate_view_visibility(definition)
        assert _views_by_app(definition) == first

    def test_application_names_match_case_insensitively(self):
        apps = [ApplicationDescriptor(name="Admin", title="Admin")]
        catalog = ViewCatalog(views=[ViewDescriptor(name="SalesReportView", applications=["admin", "ADMIN"])])
        definition = AppDefinition(applications=apps, views=catalog)
        populate_view_visibility(definition)
        assert definition.applications[0].views == ["SalesReportView"]

    def test_unknown_application_is_skipped(self):
        apps = [ApplicationDescriptor(name="admin")]
        catalog = ViewCatalog(views=[ViewDescriptor(name="ArchiveView", applications=["archive"])])
        definition = AppDefinition(applications=apps, views=catalog)
        populate_view_visibility(definition)
        assert definition.applications[0].views is None

    def test_view_without_applications_reaches_nobody(self):
        definition = AppDefinition(
            applications=_applications(),
            views=ViewCatalog(views=[ViewDescriptor(name="OrphanView")]),
        )
        populate_view_visibility(definition)
        assert all(app.views is None for app in definition.applications)

    def test_no_applications_leaves_catalog_untouched(self):
        catalog = _catalog()
        definition = AppDefinition(applications=[], views=catalog)
        before = copy.deepcopy(catalog)
        assert populate_view_visibility(definition) is definition
        assert definition.views == before

    def test_no_views_leaves_applications_untouched(self):
        apps = _applications()
        definition = AppDefinition(applications=apps, views=ViewCatalog())
        before = copy.deepcopy(apps)
        populate_view_visibility(definition)
        assert definition.applications == before


class MergeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.data_model = DataModel(
            entities=[Entity(name="Product", schema="acme"), Entity(name="Company", schema="initech")]
        )

    def test_merge_serializes_resolved_document(self) -> None:
        text = merge_applications(_applications(), self.data_model, _catalog())
        data = yaml.safe_load(text)
        self.assertEqual(["applications", "dataModel", "views"], list(data.keys()))
        admin = data["applications"][0]
        self.assertEqual("admin", admin["name"])
        self.assertEqual(["SystemHealthView", "SalesReportView", "AllDataView"], admin["views"])
        self.assertEqual(4, len(data["views"]["views"]))
        self.assertEqual(["Product", "Company"], [e["name"] for e in data["dataModel"]["entities"]])

    def test_merge_does_not_mutate_inputs(self) -> None:
        apps = _applications()
        catalog = _catalog()
        merge_applications(apps, self.data_model, catalog)
        self.assertTrue(all(app.views is None for app in apps))

    def test_merge_without_views(self) -> None:
        text = merge_applications(_applications(), self.data_model, None)
        reread = load_document(text)
        self.assertEqual(0, reread.view_count())
        self.assertEqual([[], [], [], []], [app.views for app in reread.applications])

    def test_merge_without_applications(self) -> None:
        reread = load_document(merge_applications(None, self.data_model, _catalog()))
        self.assertEqual([], reread.applications)
        self.assertEqual(2, reread.entity_count())
        self.assertEqual(4, reread.view_count())

    def test_merge_round_trips_through_document(self) -> None:
        definition = build_definition(_applications(), self.data_model, _catalog())
        reread = load_document(merge_applications(_applications(), self.data_model, _catalog()))
        self.assertEqual(definition.applications, reread.applications)
        self.assertEqual(definition.data_model, reread.data_model)
        self.assertEqual(definition.views, reread.views)

    def test_merge_view_catalog_replaces_views(self) -> None:
        definition = build_definition(_applications(), self.data_model, None)
        replacement = ViewCatalog(views=[ViewDescriptor(name="NewView", applications=["Reporting"])])
        merged = merge_view_catalog(definition, replacement)
        self.assertEqual(["NewView"], [view.name for view in merged.views.views])
        self.assertEqual(["NewView"], merged.applications[1].views)
        self.assertIsNone(definition.applications[1].views)


def test_missing_applications_list_on_view_is_a_logic_error():
    catalog = ViewCatalog(views=[ViewDescriptor(name="Broken", applications=None)])
    definition = AppDefinition(applications=_applications(), views=catalog)
    with pytest.raises(AssertionError):
        populate_view_visibility(definition)
