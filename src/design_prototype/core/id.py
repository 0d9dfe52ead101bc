"""ID Generation System.

ULID-based identifiers for components, edges and generations.

- K-sortable: components sort in creation order
- Prefixed: type-specific prefixes make logs readable (comp_*, edge_*, gen_*)
"""

from typing import NewType
from ulid import ULID

# ============================================================================
# Type-Safe ID Wrappers
# ============================================================================

ComponentID = NewType("ComponentID", str)
"""Wireframe component (and graph node) identifier"""

EdgeID = NewType("EdgeID", str)
"""Graph edge identifier"""

GenerationID = NewType("GenerationID", str)
"""Generation round trip identifier"""


class Prefix:
    """ID prefix constants."""

    COMPONENT = "comp"
    EDGE = "edge"
    GENERATION = "gen"


class Generator:
    """ULID generator."""

    def generate(self) -> str:
        """Generate a new ULID."""
        return str(ULID())

    def generate_with_prefix(self, prefix: str) -> str:
        """Generate ULID with type prefix."""
        return f"{prefix}_{self.generate()}"


# Singleton instance
_generator = Generator()


def new_component_id() -> ComponentID:
    """Generate new component ID."""
    return ComponentID(_generator.generate_with_prefix(Prefix.COMPONENT))


def new_edge_id() -> EdgeID:
    """Generate new edge ID."""
    return EdgeID(_generator.generate_with_prefix(Prefix.EDGE))


def new_generation_id() -> GenerationID:
    """Generate new generation ID."""
    return GenerationID(_generator.generate_with_prefix(Prefix.GENERATION))

