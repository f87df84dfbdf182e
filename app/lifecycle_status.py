# app/lifecycle_status.py
"""
Registry of content lifecycle statuses.

The host decides which statuses are visible to readers, searchable, and
shown in admin listings. Built-in statuses are registered on construction;
features add their own (the expiration feature adds "expired").

A registry is created by application wiring (FastAPI lifespan, CLI) and
passed around explicitly.
"""

import logging
from dataclasses import dataclass

from app.constants import ContentStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusDefinition:
    """Visibility rules for one lifecycle status."""
    name: str
    label: str
    label_count: str
    public: bool = True
    exclude_from_search: bool = False
    show_in_admin_all_list: bool = True
    show_in_admin_status_list: bool = True

    def format_count(self, count: int) -> str:
        return self.label_count % count


BUILTIN_STATUSES = (
    StatusDefinition(
        name=ContentStatus.DRAFT,
        label="Draft",
        label_count="Draft (%s)",
        public=False,
        exclude_from_search=True,
    ),
    StatusDefinition(
        name=ContentStatus.PUBLISHED,
        label="Published",
        label_count="Published (%s)",
    ),
)


class StatusRegistry:
    """Known lifecycle statuses, keyed by name."""

    def __init__(self):
        self._statuses: dict[str, StatusDefinition] = {}
        for definition in BUILTIN_STATUSES:
            self.register(definition)

    def register(self, definition: StatusDefinition) -> StatusDefinition:
        """Register a status, replacing any earlier definition with the same name."""
        if definition.name in self._statuses:
            logger.debug(f"Re-registering lifecycle status '{definition.name}'")
        self._statuses[definition.name] = definition
        return definition

    def get(self, name: str) -> StatusDefinition | None:
        return self._statuses.get(name)

    def is_registered(self, name: str) -> bool:
        return name in self._statuses

    def label_for(self, name: str) -> str:
        """Display label, falling back to the raw name for unknown host statuses."""
        definition = self._statuses.get(name)
        return definition.label if definition else name

    def public_statuses(self) -> list[str]:
        return [d.name for d in self._statuses.values() if d.public]

    def searchable_statuses(self) -> list[str]:
        return [d.name for d in self._statuses.values() if not d.exclude_from_search]

    def admin_list_statuses(self) -> list[str]:
        return [d.name for d in self._statuses.values() if d.show_in_admin_all_list]
