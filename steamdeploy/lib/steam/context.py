"""Build products and tag sets collected while running tasks."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Set
from ..errors import InputValidationError


def find_tag_names_from_list(tag_list: str) -> List[str]:
    """Parse a ';' separated tag list such as "#Manifest;#Steam".

    Empty items are ignored and duplicates dropped, keeping first-seen order.

    Raises:
        InputValidationError: If a tag name does not start with '#'
    """
    names: List[str] = []
    if not tag_list:
        return names

    for item in tag_list.split(";"):
        name = item.strip()
        if not name:
            continue
        if not name.startswith("#") or len(name) == 1:
            raise InputValidationError(f"Tag name '{name}' is not valid, tag names must start with '#'")
        if name not in names:
            names.append(name)
    return names


def find_or_add_tag_set(tag_sets: Dict[str, Set[Path]], tag_name: str) -> Set[Path]:
    """Return the file set for tag_name, creating it if needed."""
    return tag_sets.setdefault(tag_name, set())


@dataclass
class TaskContext:
    """Files produced by tasks in this run, and the tags they were given."""

    build_products: Set[Path] = field(default_factory=set)
    tag_sets: Dict[str, Set[Path]] = field(default_factory=dict)

    def add_build_product(self, path: Path, tag_names: Iterable[str] = ()) -> None:
        self.build_products.add(path)
        for tag_name in tag_names:
            find_or_add_tag_set(self.tag_sets, tag_name).add(path)
