"""
Vocabulary namespaces for the fluent scenario grammar.

A Vocabulary turns a name -> factory mapping into attribute access, so
components can contribute words like `event`, `variable` or `time` that read
naturally in a chain:

    scenario.when().variable("light").changes().then(callback)
"""

import logging
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from home_scenarios.core.errors import VocabularyConflictError

logger = logging.getLogger(__name__)


class Vocabulary:
    """
    An immutable attribute namespace.

    Values are factories (callables) or nested Vocabulary objects.
    """

    __slots__ = ("_kind", "_entries")

    def __init__(self, kind: str = "vocabulary", /, **entries: Any) -> None:
        object.__setattr__(self, "_kind", kind)
        object.__setattr__(self, "_entries", dict(entries))

    def __getattr__(self, name: str) -> Any:
        entries = object.__getattribute__(self, "_entries")
        try:
            return entries[name]
        except KeyError:
            kind = object.__getattribute__(self, "_kind")
            available = ", ".join(sorted(entries)) or "nothing"
            raise AttributeError(
                f"'{name}' is not available in this {kind} (available: {available})"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Vocabulary entries are read-only")

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __dir__(self) -> Iterable[str]:
        return sorted(self._entries)

    def names(self) -> list[str]:
        """Get entry names in merge order."""
        return list(self._entries)

    def __repr__(self) -> str:
        return f"<{self._kind}: {', '.join(self._entries)}>"


def merge_contributions(
    kind: str,
    builtins: Mapping[str, Any],
    contributions: Iterable[Tuple[str, Optional[Mapping[str, Any]]]],
) -> Vocabulary:
    """
    Merge component contributions into one Vocabulary.

    Args:
        kind: Label used in error messages ("trigger vocabulary", ...)
        builtins: Entries the engine always provides
        contributions: (component_id, mapping) pairs in registration order

    Returns:
        The merged Vocabulary

    Raises:
        VocabularyConflictError: If a name is contributed twice or shadows
            a built-in entry
    """
    entries: Dict[str, Any] = dict(builtins)
    owners: Dict[str, str] = {name: "<builtin>" for name in builtins}

    for component_id, mapping in contributions:
        if not mapping:
            continue
        for name, factory in mapping.items():
            if name in owners:
                raise VocabularyConflictError(
                    f"'{name}' in the {kind} is contributed by both "
                    f"'{owners[name]}' and '{component_id}'"
                )
            entries[name] = factory
            owners[name] = component_id

    return Vocabulary(kind, **entries)
