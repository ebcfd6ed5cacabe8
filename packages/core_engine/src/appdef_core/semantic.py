"""Cross-reference checks over a merged application definition.

These run after the merge, never inside it: the merge accepts dangling
names so configuration can be assembled incrementally.
"""

from typing import List, Set

from appdef_core.issues import Issue
from appdef_core.model import AppDefinition
from appdef_core.registry import DefinitionRegistry


def lint_issues(definition: AppDefinition) -> List[Issue]:
    issues: List[Issue] = []
    registry = DefinitionRegistry(definition)

    seen_apps: Set[str] = set()
    for index, app in enumerate(definition.applications):
        key = app.name.casefold()
        if key in seen_apps:
            issues.append(
                Issue(
                    severity="error",
                    code="DUPLICATE_APPLICATION",
                    message=f"Duplicate application name '{app.name}'.",
                    path=f"/applications/{index}",
                )
            )
        else:
            seen_apps.add(key)

        for name in app.entities:
            if registry.find_entity(name, default_schema=app.schema) is None:
                issues.append(
                    Issue(
                        severity="warn",
                        code="UNKNOWN_ENTITY_REFERENCE",
                        message=f"Application '{app.name}' lists unknown entity '{name}'.",
                        path=f"/applications/{index}/entities",
                    )
                )

        for name in app.views or []:
            if registry.find_view(name) is None:
                issues.append(
                    Issue(
                        severity="warn",
                        code="UNKNOWN_VIEW_REFERENCE",
                        message=f"Application '{app.name}' lists unknown view '{name}'.",
                        path=f"/applications/{index}/views",
                    )
                )

    seen_entities: Set[str] = set()
    for index, entity in enumerate(definition.data_model.entities):
        key = f"{entity.schema}:{entity.name}".casefold()
        if key in seen_entities:
            issues.append(
                Issue(
                    severity="error",
                    code="DUPLICATE_ENTITY",
                    message=f"Duplicate entity '{entity.name}' in schema '{entity.schema}'.",
                    path=f"/dataModel/entities/{index}",
                )
            )
        else:
            seen_entities.add(key)

        for rel in entity.relationships:
            if registry.find_entity(rel.target_entity, default_schema=entity.schema) is None:
                issues.append(
                    Issue(
                        severity="warn",
                        code="UNKNOWN_RELATIONSHIP_TARGET",
                        message=f"Entity '{entity.name}' references unknown entity '{rel.target_entity}'.",
                        path=f"/dataModel/entities/{index}/relationships",
                    )
                )

    for index, view in enumerate(definition.views.views):
        for app_name in view.applications:
            if registry.find_application(app_name) is None:
                issues.append(
                    Issue(
                        severity="warn",
                        code="VIEW_APPLICATION_NOT_CONFIGURED",
                        message=f"View '{view.name}' names application '{app_name}', which is not configured.",
                        path=f"/views/views/{index}/applications",
                    )
                )

    return issues
