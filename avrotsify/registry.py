"""
State shared by every resolution call of a translation run: the registry of
generated identifiers and the buffer that collects declarations.
"""

import logging
import re
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from avrotsify.common import simple_name

logger = logging.getLogger(__name__)

# \x00 cannot occur in an Avro name or in generated TypeScript
FORWARD_REFERENCE = re.compile('\x00([^\x00]+)\x00')


def forward_reference(qualified_name: str) -> str:
    """Marker standing in for a type name that is not registered yet."""
    return f"\x00{qualified_name}\x00"


class TypeRegistry:
    """
    Maps fully-qualified Avro type names to the TypeScript identifiers
    generated for them.

    A qualified name is inserted at most once. Identifiers are unique within
    a registry: if two Avro names would map to the same identifier, the later
    one gets a numeric suffix.
    """

    def __init__(self) -> None:
        self._identifiers: Dict[str, str] = {}
        self._owners: Dict[str, str] = {}

    def __contains__(self, qualified_name: str) -> bool:
        return qualified_name in self._identifiers

    def __len__(self) -> int:
        return len(self._identifiers)

    def items(self):
        return self._identifiers.items()

    def lookup(self, name: str) -> Optional[str]:
        """
        Find the identifier for a type name.

        The exact qualified name is tried first, then the first registered
        type with the same simple name.
        """
        if name in self._identifiers:
            return self._identifiers[name]
        wanted = simple_name(name)
        for qualified_name, identifier in self._identifiers.items():
            if simple_name(qualified_name) == wanted:
                return identifier
        return None

    def reserve(self, qualified_name: str, candidate: str) -> str:
        """
        Register ``qualified_name`` under ``candidate`` and return the
        identifier actually bound to it.
        """
        if qualified_name in self._identifiers:
            return self._identifiers[qualified_name]
        identifier = candidate
        suffix = 2
        while identifier in self._owners:
            identifier = f"{candidate}{suffix}"
            suffix += 1
        if identifier != candidate:
            logger.warning("Type name %s collides with %s, using %s",
                           qualified_name, self._owners[candidate], identifier)
        self._identifiers[qualified_name] = identifier
        self._owners[identifier] = qualified_name
        return identifier

    def register_alias(self, qualified_name: str, type_text: str) -> None:
        """Bind a name to an existing TypeScript type without claiming it as an identifier."""
        self._identifiers.setdefault(qualified_name, type_text)

    def snapshot(self) -> Tuple[Dict[str, str], Dict[str, str]]:
        return dict(self._identifiers), dict(self._owners)

    def restore(self, snapshot: Tuple[Dict[str, str], Dict[str, str]]) -> None:
        identifiers, owners = snapshot
        self._identifiers = dict(identifiers)
        self._owners = dict(owners)


class DeclarationBuffer:
    """Ordered, append-only collection of declaration text blocks."""

    def __init__(self) -> None:
        self._blocks: List[str] = []

    def __iter__(self) -> Iterator[str]:
        return iter(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def append(self, declaration: str) -> None:
        self._blocks.append(declaration)

    def truncate(self, length: int) -> None:
        """Drop every block appended after the buffer had ``length`` blocks."""
        del self._blocks[length:]

    def pending_references(self) -> List[str]:
        """The distinct names of forward-reference markers still in the buffer."""
        names: List[str] = []
        for block in self._blocks:
            for name in FORWARD_REFERENCE.findall(block):
                if name not in names:
                    names.append(name)
        return names

    def link(self, resolve_name: Callable[[str], str]) -> None:
        """Replace every forward-reference marker with ``resolve_name(qualified_name)``."""
        self._blocks = [FORWARD_REFERENCE.sub(lambda match: resolve_name(match.group(1)), block)
                        for block in self._blocks]

    @property
    def blocks(self) -> List[str]:
        return list(self._blocks)

    def render(self, indent: str = '  ') -> str:
        """Join the blocks into one text, with tabs normalized to ``indent``."""
        return '\n'.join(self._blocks).replace('\t', indent)
