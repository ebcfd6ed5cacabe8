"""Merge application settings, the data model and the view catalog.

Visibility resolution walks every view's ``applications`` list and adds the
view name to each named application's ``views`` list. Application names
match case-insensitively; names that match no application are skipped so a
view can be declared before the application that will show it.
"""

import logging
from copy import deepcopy
from typing import List, Optional

from appdef_core.document import dump_document
from appdef_core.model import AppDefinition, ApplicationDescriptor, DataModel, ViewCatalog
from appdef_core.naming import add_unique_name, find_by_name

logger = logging.getLogger(__name__)


def find_application(
    applications: List[ApplicationDescriptor], name: str
) -> Optional[ApplicationDescriptor]:
    return find_by_name(applications, name, key=lambda app: app.name)


def populate_view_visibility(definition: AppDefinition) -> AppDefinition:
    """Fill each application's visible-view list from the view catalog, in place.

    Safe to run repeatedly: a view already listed for an application is
    never added twice.
    """
    if not definition.applications or not definition.views.views:
        return definition

    for view in definition.views.views:
        assert view.applications is not None, f"view {view.name} has no applications list"
        for app_name in view.applications:
            app = find_application(definition.applications, app_name)
            if app is None:
                logger.debug("View %s names unknown application %r; skipped", view.name, app_name)
                continue
            if app.views is None:
                app.views = []
            add_unique_name(app.views, view.name)

    return definition


def build_definition(
    applications: Optional[List[ApplicationDescriptor]],
    data_model: Optional[DataModel],
    view_catalog: Optional[ViewCatalog] = None,
) -> AppDefinition:
    """Assemble a resolved ``AppDefinition`` from copies of the inputs."""
    definition = AppDefinition(
        applications=deepcopy(applications) if applications else [],
        data_model=deepcopy(data_model) if data_model is not None else DataModel(),
        views=deepcopy(view_catalog) if view_catalog is not None else ViewCatalog(),
    )
    return populate_view_visibility(definition)


def merge_applications(
    applications: Optional[List[ApplicationDescriptor]],
    data_model: Optional[DataModel],
    view_catalog: Optional[ViewCatalog] = None,
) -> str:
    """Merge and serialize. The caller's objects are left untouched."""
    definition = build_definition(applications, data_model, view_catalog)
    logger.debug(
        "Merged %d application(s), %d entity(ies), %d view(s)",
        len(definition.applications),
        definition.entity_count(),
        definition.view_count(),
    )
    return dump_document(definition)


def merge_view_catalog(definition: AppDefinition, view_catalog: ViewCatalog) -> AppDefinition:
    """Replace the view catalog of ``definition`` and re-resolve visibility."""
    merged = deepcopy(definition)
    merged.views = deepcopy(view_catalog)
    return populate_view_visibility(merged)
