"""Relationship inference between classes.

Relationships are a byproduct of walking declarations: the extraction
driver hands each supertype list, field, method signature and local
variable declaration to the inferencer, which decides whether it refers to
another user type and records the edge on the owning class.
"""

import logging
from typing import Collection, Iterable, List, Optional

from .java_syntax import LocalVariableDeclaration
from .models import Relationship, RelationshipKind, UMLClass, UMLMethod, UMLVariable, VariableKind
from .registry import ClassRegistry
from .type_classifier import TypeClassifier, TypeRef

logger = logging.getLogger(__name__)

SUPERTYPE_KINDS = (
    RelationshipKind.INHERITS_OR_IMPLEMENTS,
    RelationshipKind.GENERALIZATION,
    RelationshipKind.REALIZATION,
)


class RelationshipInferencer:
    """Attach generalization, realization and association edges to classes."""

    def __init__(self, registry: ClassRegistry, classifier: Optional[TypeClassifier] = None):
        """Initialize the inferencer.

        Args:
            registry: Registry for the current run
            classifier: Type classifier (defaults to the Java configuration)
        """
        self.registry = registry
        self.classifier = classifier or TypeClassifier()

    def link_supertypes(self, umlclass: UMLClass, supertype_names: Iterable[str]) -> None:
        """Record extends/implements edges as pending until all files are parsed.

        Whether a supertype is an interface may only be known once its own
        declaration is seen; see ``resolve_supertypes``.
        """
        for supertype_name in supertype_names:
            simple_name = self.classifier.simple_name(supertype_name)
            if not self.classifier.is_user_type(simple_name):
                logger.debug(f"Ignoring built-in supertype {supertype_name} of {umlclass.name}")
                continue
            self._add_edge(umlclass, simple_name, RelationshipKind.INHERITS_OR_IMPLEMENTS)

    def link_from_variable(self, umlclass: UMLClass, variable: UMLVariable) -> None:
        self._associate(umlclass, variable.type_ref)

    def link_from_method(self, umlclass: UMLClass, method: UMLMethod) -> None:
        """Associate the class with every user-typed parameter."""
        for parameter in method.parameters:
            self.link_from_variable(umlclass, parameter)

    def link_from_local(
        self,
        umlclass: UMLClass,
        declaration: LocalVariableDeclaration,
        type_parameters: Collection[str] = (),
    ) -> None:
        """Associate the class with every user-typed local declarator.

        Args:
            umlclass: Class owning the method body
            declaration: Local variable declaration statement
            type_parameters: Type variables of the enclosing class and method
        """
        for declarator in declaration.declarators:
            local = UMLVariable(
                name=declarator.name,
                type=declarator.type,
                type_ref=self.classifier.classify(declarator.type, type_parameters),
                kind=VariableKind.LOCAL,
                modifiers=declaration.modifiers,
                initial_value=declarator.initializer,
            )
            self.link_from_variable(umlclass, local)

    def resolve_supertypes(self) -> int:
        """Turn supertype edges into generalization or realization.

        A target that is a declared interface gives a realization; any other
        target, including undeclared library types, gives a generalization.
        Safe to call again after more files are extracted: earlier verdicts
        are re-evaluated against the current interface flags.

        Returns:
            Number of edges whose kind changed
        """
        resolved = 0
        for umlclass in self.registry:
            relationships: List[Relationship] = []
            changed = False
            for relationship in umlclass.relationships:
                if relationship.kind in SUPERTYPE_KINDS:
                    kind = (
                        RelationshipKind.REALIZATION
                        if relationship.target.is_interface
                        else RelationshipKind.GENERALIZATION
                    )
                    if kind is not relationship.kind:
                        relationship = Relationship(
                            relationship.source, relationship.target, kind, relationship.multiplicity
                        )
                        resolved += 1
                        changed = True
                relationships.append(relationship)
            if changed:
                umlclass.replace_relationships(relationships)

        logger.debug(f"Resolved {resolved} supertype relationships")
        return resolved

    def _associate(self, umlclass: UMLClass, type_ref: TypeRef) -> None:
        if not type_ref.is_user_type:
            return
        self._add_edge(umlclass, type_ref.simple_name, RelationshipKind.ASSOCIATION, type_ref.multiplicity)

    def _add_edge(
        self,
        umlclass: UMLClass,
        target_name: str,
        kind: RelationshipKind,
        multiplicity: Optional[str] = None,
    ) -> None:
        if target_name == umlclass.name:
            return
        target = self.registry.get_or_create(target_name)
        if umlclass.add_relationship(Relationship(umlclass, target, kind, multiplicity)):
            logger.debug(f"Added {kind.value} edge {umlclass.name} -> {target_name}")
