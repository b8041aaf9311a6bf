"""Classification of Asana tasks before they reach the local task store."""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from models.external_task import ExternalSection
from models.task import CATEGORIES, DEFAULT_CATEGORY

# Prefixes of the ADLI documentation tasks ProcessHub itself exports to Asana.
# Importing them back would duplicate the process documentation as tasks.
DEFAULT_DOC_PATTERNS: Mapping[str, str] = MappingProxyType(
    {
        "[adli: approach]": "approach",
        "[adli: deployment]": "deployment",
        "[adli: learning]": "learning",
        "[adli: integration]": "integration",
        "approach:": "approach",
        "deployment:": "deployment",
        "learning:": "learning",
        "integration:": "integration",
    }
)

DEFAULT_SECTION_CATEGORIES: Mapping[str, str] = MappingProxyType(
    {name: name for name in CATEGORIES}
)


def _normalise(value: Optional[str]) -> str:
    return (value or "").strip().lower()


class TaskClassifier:
    """Pure lookups over two fixed tables; both tables are injectable."""

    def __init__(
        self,
        doc_patterns: Optional[Mapping[str, str]] = None,
        section_categories: Optional[Mapping[str, str]] = None,
        default_category: str = DEFAULT_CATEGORY,
    ) -> None:
        patterns = DEFAULT_DOC_PATTERNS if doc_patterns is None else doc_patterns
        sections = DEFAULT_SECTION_CATEGORIES if section_categories is None else section_categories
        if default_category not in CATEGORIES:
            raise ValueError(f"Unknown category: {default_category}")
        for category in sections.values():
            if category not in CATEGORIES:
                raise ValueError(f"Unknown category: {category}")

        self.doc_patterns: Mapping[str, str] = MappingProxyType(
            {_normalise(key): value for key, value in patterns.items()}
        )
        self.section_categories: Mapping[str, str] = MappingProxyType(
            {_normalise(key): value for key, value in sections.items()}
        )
        self.default_category = default_category

    def documentation_dimension(self, task_name: Optional[str]) -> Optional[str]:
        lowered = _normalise(task_name)
        for pattern, dimension in self.doc_patterns.items():
            if lowered.startswith(pattern):
                return dimension
        return None

    def is_documentation_task(self, task_name: Optional[str]) -> bool:
        return self.documentation_dimension(task_name) is not None

    def category_for_section(self, section_name: Optional[str]) -> str:
        return self.section_categories.get(_normalise(section_name), self.default_category)

    def find_documentation_tasks(
        self, sections: Iterable[ExternalSection]
    ) -> Dict[str, Dict[str, str]]:
        """Return ``dimension -> {"gid", "notes"}`` for the first match per dimension.

        Only top-level tasks are inspected.
        """
        found: Dict[str, Dict[str, str]] = {}
        for section in sections:
            for task in section.tasks:
                dimension = self.documentation_dimension(task.name)
                if dimension and dimension not in found:
                    found[dimension] = {"gid": task.gid, "notes": task.notes}
        return found


__all__ = [
    "DEFAULT_DOC_PATTERNS",
    "DEFAULT_SECTION_CATEGORIES",
    "TaskClassifier",
]
