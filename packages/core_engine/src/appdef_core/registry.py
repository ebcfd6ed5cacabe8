"""Name-keyed lookup over a produced application definition.

Consumers that dispatch on entity or view names at runtime use this index
instead of walking the document themselves. Entities are keyed by their
qualified name ``schema:Entity``; lookups are case-insensitive.
"""

from typing import Dict, List, Optional

from appdef_core.model import AppDefinition, ApplicationDescriptor, Entity, ViewDescriptor
from appdef_core.naming import qualified_name, split_qualified_name


def _key(value: str) -> str:
    return value.casefold()


class DefinitionRegistry:
    def __init__(self, definition: AppDefinition) -> None:
        self.definition = definition
        self._applications: Dict[str, ApplicationDescriptor] = {}
        self._entities: Dict[str, Entity] = {}
        self._entities_by_name: Dict[str, List[Entity]] = {}
        self._views: Dict[str, ViewDescriptor] = {}

        for app in definition.applications:
            self._applications.setdefault(_key(app.name), app)
        for entity in definition.data_model.entities:
            self._entities.setdefault(_key(qualified_name(entity.schema, entity.name)), entity)
            self._entities_by_name.setdefault(_key(entity.name), []).append(entity)
        for view in definition.views.views:
            self._views.setdefault(_key(view.name), view)

    @property
    def application_names(self) -> List[str]:
        return [app.name for app in self.definition.applications]

    def find_application(self, name: str) -> Optional[ApplicationDescriptor]:
        if not name:
            return None
        return self._applications.get(_key(name))

    def find_entity(self, name: str, default_schema: str = "") -> Optional[Entity]:
        """Find ``schema:Entity``; a bare name tries ``default_schema`` then any schema."""
        if not name or not name.strip():
            return None
        schema, entity_name = split_qualified_name(name)
        if schema:
            return self._entities.get(_key(qualified_name(schema, entity_name)))
        if default_schema:
            found = self._entities.get(_key(qualified_name(default_schema, entity_name)))
            if found is not None:
                return found
        candidates = self._entities_by_name.get(_key(entity_name), [])
        return candidates[0] if candidates else None

    def find_view(self, name: str) -> Optional[ViewDescriptor]:
        if not name:
            return None
        return self._views.get(_key(name))

    def entities_for(self, app_name: str) -> List[Entity]:
        """Entities an application lists, resolved against its own schema; unknown names are dropped."""
        app = self.find_application(app_name)
        if app is None:
            return []
        entities = []
        for name in app.entities:
            entity = self.find_entity(name, default_schema=app.schema)
            if entity is not None:
                entities.append(entity)
        return entities

    def views_for(self, app_name: str) -> List[ViewDescriptor]:
        app = self.find_application(app_name)
        if app is None or not app.views:
            return []
        return [view for view in (self.find_view(name) for name in app.views) if view is not None]

    def is_entity_visible(self, app_name: str, entity_name: str) -> bool:
        app = self.find_application(app_name)
        if app is None:
            return False
        entity = self.find_entity(entity_name, default_schema=app.schema)
        return entity is not None and any(candidate is entity for candidate in self.entities_for(app_name))

    def is_view_visible(self, app_name: str, view_name: str) -> bool:
        view = self.find_view(view_name)
        return view is not None and any(candidate is view for candidate in self.views_for(app_name))
