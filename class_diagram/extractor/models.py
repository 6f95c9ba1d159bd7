"""Data models for the extracted class diagram."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from .type_classifier import TypeRef


class Modifier(Enum):
    """Java declaration modifiers."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    STATIC = "static"
    FINAL = "final"
    ABSTRACT = "abstract"
    DEFAULT = "default"
    SYNCHRONIZED = "synchronized"
    NATIVE = "native"
    TRANSIENT = "transient"
    VOLATILE = "volatile"
    STRICTFP = "strictfp"
    SEALED = "sealed"
    NON_SEALED = "non-sealed"


# Canonical modifier set for every interface method
PUBLIC_ABSTRACT: FrozenSet[Modifier] = frozenset({Modifier.PUBLIC, Modifier.ABSTRACT})


class VariableKind(Enum):
    FIELD = "field"
    PARAMETER = "parameter"
    LOCAL = "local"


class RelationshipKind(Enum):
    """Kinds of edges between classes."""

    GENERALIZATION = "generalization"
    REALIZATION = "realization"
    ASSOCIATION = "association"
    # Supertype edge whose final kind is decided once every file is parsed
    INHERITS_OR_IMPLEMENTS = "inherits_or_implements"


@dataclass
class UMLVariable:
    """A field, parameter or local variable."""

    name: str
    type: str  # raw type token as written
    type_ref: TypeRef
    kind: VariableKind = VariableKind.FIELD
    modifiers: FrozenSet[Modifier] = frozenset()
    initial_value: Optional[str] = None

    @property
    def is_user_type(self) -> bool:
        return self.type_ref.is_user_type


@dataclass
class UMLMethod:
    """A method or constructor."""

    name: str
    is_constructor: bool = False
    modifiers: FrozenSet[Modifier] = frozenset()
    parameters: List[UMLVariable] = field(default_factory=list)
    return_type: Optional[str] = None  # None for constructors


@dataclass(eq=False)
class UMLClass:
    """A class or interface.

    Identity is the simple name; instances compare and hash by identity so
    the registry can hand out one object per name.
    """

    name: str
    is_interface: bool = False
    methods: List[UMLMethod] = field(default_factory=list)
    variables: List[UMLVariable] = field(default_factory=list)
    declared: bool = False  # set once the declaration has been published
    _relationships: Dict["Relationship", None] = field(default_factory=dict, init=False, repr=False)

    def __setattr__(self, key: str, value: Any) -> None:
        if key == "name" and "name" in self.__dict__:
            raise AttributeError(f"UMLClass name is immutable ({self.name})")
        super().__setattr__(key, value)

    @property
    def relationships(self) -> List["Relationship"]:
        """Outgoing edges in the order they were first recorded."""
        return list(self._relationships)

    def add_relationship(self, relationship: "Relationship") -> bool:
        """Record an outgoing edge.

        Returns:
            False if an equal edge was already recorded
        """
        if relationship.source is not self:
            raise ValueError(f"Edge {relationship} does not start at {self.name}")
        if relationship in self._relationships:
            return False
        self._relationships[relationship] = None
        return True

    def replace_relationships(self, relationships: List["Relationship"]) -> None:
        """Swap in a new edge list, collapsing duplicates."""
        self._relationships = dict.fromkeys(relationships)

    def get_relationships(self, kind: RelationshipKind) -> List["Relationship"]:
        return [r for r in self._relationships if r.kind is kind]


@dataclass(frozen=True)
class Relationship:
    """Directed edge between two registered classes."""

    source: UMLClass
    target: UMLClass
    kind: RelationshipKind
    multiplicity: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        if self.source is self.target:
            raise ValueError(f"Self-referencing edge on {self.source.name}")

    def __repr__(self) -> str:
        suffix = f" [{self.multiplicity}]" if self.multiplicity else ""
        return f"{self.source.name} -> {self.target.name} ({self.kind.value}){suffix}"
