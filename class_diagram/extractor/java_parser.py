"""Extraction of UML classes from parsed Java compilation units."""

import logging
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union

from .java_syntax import (
    CompilationUnit,
    ConstructorDeclaration,
    FieldDeclaration,
    JavaSyntaxProvider,
    LocalVariableDeclaration,
    MethodDeclaration,
    Parameter,
    SourceError,
    Statement,
    TypeDeclaration,
    TypeKind,
)
from .models import PUBLIC_ABSTRACT, UMLClass, UMLMethod, UMLVariable, VariableKind
from .registry import ClassRegistry
from .relationships import RelationshipInferencer
from .type_classifier import TypeClassifier

logger = logging.getLogger(__name__)


class ClassDiagramExtractor:
    """Build UMLClass entities for every class and interface in the input.

    Each top-level class or interface is fetched from the registry (it may
    already exist as a forward reference), flagged as class or interface,
    linked to its supertypes, filled with fields and methods, and published.
    """

    def __init__(
        self,
        registry: Optional[ClassRegistry] = None,
        syntax_provider: Optional[JavaSyntaxProvider] = None,
        classifier: Optional[TypeClassifier] = None,
    ):
        """Initialize the extractor.

        Args:
            registry: Class registry for this run (a new one by default)
            syntax_provider: Source parser (created lazily when omitted)
            classifier: Type classifier (defaults to the Java configuration)
        """
        self.registry = registry if registry is not None else ClassRegistry()
        self.classifier = classifier or TypeClassifier()
        self.inferencer = RelationshipInferencer(self.registry, self.classifier)
        self._syntax_provider = syntax_provider
        self.failed_files: List[Tuple[str, str]] = []

    @property
    def syntax_provider(self) -> JavaSyntaxProvider:
        if self._syntax_provider is None:
            self._syntax_provider = JavaSyntaxProvider()
        return self._syntax_provider

    def parse_files(self, file_paths: Iterable[Union[str, Path]]) -> List[UMLClass]:
        """Parse each file in order and return the published classes.

        Files that are missing, unreadable or malformed are logged, recorded
        in ``failed_files`` and skipped.

        Args:
            file_paths: Java source files

        Returns:
            Published classes in first-registration order
        """
        parsed = 0
        for file_path in file_paths:
            logger.info(f"Parsing {file_path}")
            try:
                unit = self.syntax_provider.parse_file(file_path)
            except SourceError as e:
                logger.error(f"Skipping {e.path}: {e}")
                self.failed_files.append((e.path, str(e)))
                continue
            self.extract_compilation_unit(unit)
            parsed += 1

        return self.finish(parsed)

    def parse_source(self, source_code: Union[bytes, str], path: str = "<string>") -> List[UMLClass]:
        """Parse in-memory source and return the published classes."""
        try:
            unit = self.syntax_provider.parse_source(source_code, path)
        except SourceError as e:
            logger.error(f"Skipping {e.path}: {e}")
            self.failed_files.append((e.path, str(e)))
            return self.finish(0)
        self.extract_compilation_unit(unit)
        return self.finish(1)

    def finish(self, parsed: int = 0) -> List[UMLClass]:
        """Resolve pending supertype edges and return the published classes."""
        self.inferencer.resolve_supertypes()
        classes = self.registry.all_classes()
        logger.info(
            f"Extracted {len(classes)} classes from {parsed} files "
            f"({len(self.failed_files)} failed)"
        )
        return classes

    def extract_compilation_unit(self, unit: CompilationUnit) -> None:
        for declaration in unit.types:
            if declaration.kind not in (TypeKind.CLASS, TypeKind.INTERFACE):
                logger.debug(f"Skipping {declaration.kind.value} {declaration.name} in {unit.path}")
                continue
            self._extract_type(declaration)

    def _extract_type(self, declaration: TypeDeclaration) -> UMLClass:
        umlclass = self.registry.get_or_create(declaration.name)
        umlclass.is_interface = declaration.kind is TypeKind.INTERFACE
        self.inferencer.link_supertypes(umlclass, declaration.supertypes)

        # Type variables such as T in Box<T> never name a class
        scope = frozenset(declaration.type_parameters)
        for member in declaration.members:
            match member:
                case FieldDeclaration():
                    self._extract_fields(umlclass, member, scope)
                case MethodDeclaration():
                    self._extract_method(umlclass, member, scope | set(member.type_parameters))
                case ConstructorDeclaration():
                    self._extract_constructor(umlclass, member, scope | set(member.type_parameters))
                case _:
                    raise TypeError(f"Unexpected member declaration: {member!r}")

        self.registry.publish(umlclass)
        logger.debug(
            f"Published {umlclass.name}: {len(umlclass.variables)} fields, "
            f"{len(umlclass.methods)} methods"
        )
        return umlclass

    def _extract_fields(
        self, umlclass: UMLClass, field: FieldDeclaration, scope: FrozenSet[str]
    ) -> None:
        for declarator in field.declarators:
            variable = UMLVariable(
                name=declarator.name,
                type=declarator.type,
                type_ref=self.classifier.classify(declarator.type, scope),
                kind=VariableKind.FIELD,
                modifiers=field.modifiers,
                initial_value=declarator.initializer,
            )
            umlclass.variables.append(variable)
            self.inferencer.link_from_variable(umlclass, variable)

    def _extract_method(
        self, umlclass: UMLClass, method: MethodDeclaration, scope: FrozenSet[str]
    ) -> None:
        umlmethod = UMLMethod(
            name=method.name,
            is_constructor=False,
            # Interface methods are always shown as public abstract
            modifiers=PUBLIC_ABSTRACT if umlclass.is_interface else method.modifiers,
            parameters=self._build_parameters(method.parameters, scope),
            return_type=method.return_type,
        )
        self._add_method(umlclass, umlmethod, method.body, scope)

    def _extract_constructor(
        self, umlclass: UMLClass, constructor: ConstructorDeclaration, scope: FrozenSet[str]
    ) -> None:
        umlmethod = UMLMethod(
            name=constructor.name,
            is_constructor=True,
            modifiers=constructor.modifiers,
            parameters=self._build_parameters(constructor.parameters, scope),
        )
        self._add_method(umlclass, umlmethod, constructor.body, scope)

    def _add_method(
        self,
        umlclass: UMLClass,
        umlmethod: UMLMethod,
        body: Optional[List[Statement]],
        scope: FrozenSet[str],
    ) -> None:
        umlclass.methods.append(umlmethod)
        self.inferencer.link_from_method(umlclass, umlmethod)

        # Only the body's own statement list; nested blocks are not scanned
        for statement in body or []:
            if isinstance(statement, LocalVariableDeclaration):
                self.inferencer.link_from_local(umlclass, statement, scope)

    def _build_parameters(
        self, parameters: List[Parameter], scope: FrozenSet[str]
    ) -> List[UMLVariable]:
        return [
            UMLVariable(
                name=parameter.name,
                type=parameter.type,
                type_ref=self.classifier.classify(parameter.type, scope),
                kind=VariableKind.PARAMETER,
            )
            for parameter in parameters
        ]


def extract_class_diagram(file_paths: Iterable[Union[str, Path]]) -> ClassRegistry:
    """Run one independent extraction over ``file_paths``.

    Returns:
        The run's registry; ``all_classes()`` gives the published classes
    """
    extractor = ClassDiagramExtractor(registry=ClassRegistry())
    extractor.parse_files(file_paths)
    return extractor.registry
