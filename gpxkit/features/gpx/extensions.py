"""
Extension tree types.

Vendor XML under <extensions> is carried as an opaque, namespace-tagged
tree so it survives a decode/encode round trip untouched.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class GPXNamespace:
    """A namespace declaration (xmlns:prefix="uri")."""
    prefix: str
    uri: str


@dataclass
class GPXExtension:
    """
    One element of an extension fragment.

    A leaf carries its text in ``value`` (None when the element is empty);
    an element with element children carries them in ``children`` and has
    no value. ``namespace`` is set only when the element itself declares
    the namespace of its prefix.
    """
    name: str
    prefix: Optional[str] = None
    value: Optional[str] = None
    namespace: Optional[GPXNamespace] = None
    children: List["GPXExtension"] = field(default_factory=list)

    def __post_init__(self):
        # An empty element has no text; "" and None write the same XML
        if self.value == "":
            self.value = None

    @property
    def qualified_name(self) -> str:
        """Element name as written, e.g. 'gpxtpx:hr'."""
        if self.prefix:
            return f"{self.prefix}:{self.name}"
        return self.name

    @property
    def has_data(self) -> bool:
        return bool(self.name) or bool(self.value) or len(self.children) > 0

    def find(self, name: str) -> Optional["GPXExtension"]:
        """First direct child with the given local name."""
        for child in self.children:
            if child.name == name:
                return child
        return None


class NamespaceScope:
    """
    Prefix bindings in effect at one point of an XML tree.

    Scopes chain to their parent; lookups walk outwards, so the nearest
    declaration of a prefix wins. The default namespace is bound to the
    prefix None.
    """

    def __init__(
        self,
        bindings: Optional[Dict[Optional[str], str]] = None,
        parent: Optional["NamespaceScope"] = None
    ):
        self.bindings = dict(bindings or {})
        self.parent = parent

    def child(self, bindings: Dict[Optional[str], str]) -> "NamespaceScope":
        """Scope for an element that declares ``bindings``."""
        if not bindings:
            return self
        return NamespaceScope(bindings, parent=self)

    def resolve(self, prefix: Optional[str]) -> Optional[str]:
        """URI bound to ``prefix``, or None when nothing declares it."""
        scope = self
        while scope is not None:
            if prefix in scope.bindings:
                return scope.bindings[prefix]
            scope = scope.parent
        return None

    def prefix_for(self, uri: str) -> Optional[str]:
        """
        Prefix bound to ``uri`` (None for the default namespace).

        Raises:
            KeyError: If no prefix in scope is bound to ``uri``
        """
        shadowed = set()
        scope = self
        while scope is not None:
            for prefix, bound in reversed(list(scope.bindings.items())):
                if prefix in shadowed:
                    continue
                if bound == uri:
                    return prefix
                shadowed.add(prefix)
            scope = scope.parent
        raise KeyError(uri)
