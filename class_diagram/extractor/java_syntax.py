"""Java syntax trees via tree-sitter, reduced to declaration records.

The provider turns one source file into a ``CompilationUnit`` holding its
top-level type declarations. Members are a tagged union of
``FieldDeclaration``, ``MethodDeclaration`` and ``ConstructorDeclaration``;
method bodies are lists of ``LocalVariableDeclaration`` or
``OtherStatement``.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, FrozenSet, List, Optional, Union

import tree_sitter_java as tsjava
from tree_sitter import Language, Parser

from .grammars import LanguageConfig, get_language_registry
from .models import Modifier

logger = logging.getLogger(__name__)


class SourceError(Exception):
    """A source file could not be turned into a compilation unit."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class InputError(SourceError):
    """The file is missing or unreadable."""


class SourceNotFoundError(InputError):
    pass


class SourceReadError(InputError):
    pass


class JavaSyntaxError(SourceError):
    """The file contains malformed Java."""

    def __init__(self, path: str, line: Optional[int] = None):
        self.line = line
        message = f"syntax error at line {line}" if line else "syntax error"
        super().__init__(path, message)


class TypeKind(Enum):
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    OTHER = "other"


@dataclass
class VariableDeclarator:
    name: str
    type: str  # declared type, including C-style dimensions on the name
    initializer: Optional[str] = None


@dataclass
class Parameter:
    name: str
    type: str


@dataclass
class LocalVariableDeclaration:
    type: str
    declarators: List[VariableDeclarator]
    modifiers: FrozenSet[Modifier] = frozenset()


@dataclass
class OtherStatement:
    node_type: str


Statement = Union[LocalVariableDeclaration, OtherStatement]


@dataclass
class FieldDeclaration:
    type: str
    declarators: List[VariableDeclarator]
    modifiers: FrozenSet[Modifier] = frozenset()


@dataclass
class MethodDeclaration:
    name: str
    return_type: str
    parameters: List[Parameter] = field(default_factory=list)
    modifiers: FrozenSet[Modifier] = frozenset()
    body: Optional[List[Statement]] = None  # None for abstract methods
    type_parameters: List[str] = field(default_factory=list)


@dataclass
class ConstructorDeclaration:
    name: str
    parameters: List[Parameter] = field(default_factory=list)
    modifiers: FrozenSet[Modifier] = frozenset()
    body: Optional[List[Statement]] = None
    type_parameters: List[str] = field(default_factory=list)


MemberDeclaration = Union[FieldDeclaration, MethodDeclaration, ConstructorDeclaration]


@dataclass
class TypeDeclaration:
    kind: TypeKind
    name: str
    supertypes: List[str] = field(default_factory=list)
    members: List[MemberDeclaration] = field(default_factory=list)
    type_parameters: List[str] = field(default_factory=list)


@dataclass
class CompilationUnit:
    path: str
    types: List[TypeDeclaration] = field(default_factory=list)


def _text(node: Any) -> str:
    return node.text.decode("utf-8", errors="replace") if node is not None else ""


class JavaSyntaxProvider:
    """Parse Java source with tree-sitter into declaration records."""

    # Language module mapping
    LANGUAGE_MODULES = {
        "java": tsjava,
    }

    def __init__(self, language: str = "java", config: Optional[LanguageConfig] = None):
        """Initialize the provider.

        Args:
            language: Language name in the language registry
            config: Explicit language configuration (overrides the registry)
        """
        if config is None:
            config = get_language_registry().get_language_config(language)
        if config is None:
            raise ValueError(f"No language configuration for {language}")
        self.config = config

        module = self.LANGUAGE_MODULES.get(config.tree_sitter_language)
        if module is None:
            raise ValueError(f"No module found for language: {config.tree_sitter_language}")

        self.language = Language(module.language())
        self.parser = Parser()
        self.parser.language = self.language
        logger.debug(f"Initialized parser for {config.name}")

    def parse_file(self, file_path: Union[str, Path]) -> CompilationUnit:
        """Read and parse one source file.

        Raises:
            SourceNotFoundError: The path does not exist
            SourceReadError: The file could not be read
            JavaSyntaxError: The source is malformed
        """
        path = str(file_path)
        try:
            with open(path, "rb") as f:
                source_code = f.read()
        except FileNotFoundError as e:
            raise SourceNotFoundError(path, f"file not found ({e.strerror})") from e
        except OSError as e:
            raise SourceReadError(path, f"cannot read file ({e.strerror or e})") from e

        return self.parse_source(source_code, path)

    def parse_source(self, source_code: Union[bytes, str], path: str = "<string>") -> CompilationUnit:
        """Parse in-memory source into a compilation unit.

        tree-sitter recovers from malformed input on its own; any ERROR or
        MISSING node is reported as a JavaSyntaxError instead.
        """
        if isinstance(source_code, str):
            source_code = source_code.encode("utf-8")

        tree = self.parser.parse(source_code)
        root_node = tree.root_node

        if root_node.has_error:
            error_node = self._find_error_node(root_node)
            line = error_node.start_point[0] + 1 if error_node is not None else None
            raise JavaSyntaxError(path, line)

        unit = CompilationUnit(path=path)
        for node in root_node.named_children:
            kind = self.config.get_declaration_kind(node.type)
            if kind is None:
                continue
            unit.types.append(self._build_type_declaration(node, TypeKind(kind)))

        logger.debug(f"Parsed {len(unit.types)} top-level types from {path}")
        return unit

    def _build_type_declaration(self, node: Any, kind: TypeKind) -> TypeDeclaration:
        declaration = TypeDeclaration(
            kind=kind,
            name=_text(node.child_by_field_name("name")),
            type_parameters=self._extract_type_parameters(node),
        )
        if kind not in (TypeKind.CLASS, TypeKind.INTERFACE):
            return declaration

        # class A extends B implements C, D / interface E extends F, G
        for child in node.children:
            if child.type == "superclass":
                declaration.supertypes.extend(_text(t) for t in child.named_children)
            elif child.type in ("super_interfaces", "extends_interfaces"):
                for type_list in child.named_children:
                    if type_list.type == "type_list":
                        declaration.supertypes.extend(_text(t) for t in type_list.named_children)

        body = node.child_by_field_name("body")
        if body is None:
            return declaration

        for member in body.named_children:
            if member.type in ("field_declaration", "constant_declaration"):
                declaration.members.append(self._build_field(member))
            elif member.type == "method_declaration":
                declaration.members.append(self._build_method(member))
            elif member.type == "constructor_declaration":
                declaration.members.append(self._build_constructor(member))
            else:
                logger.debug(f"Skipping {member.type} in {declaration.name}")

        return declaration

    def _build_field(self, node: Any) -> FieldDeclaration:
        field_type = _text(node.child_by_field_name("type"))
        return FieldDeclaration(
            type=field_type,
            declarators=self._extract_declarators(node, field_type),
            modifiers=self._extract_modifiers(node),
        )

    def _build_method(self, node: Any) -> MethodDeclaration:
        body = node.child_by_field_name("body")
        return MethodDeclaration(
            name=_text(node.child_by_field_name("name")),
            return_type=_text(node.child_by_field_name("type")),
            parameters=self._extract_parameters(node),
            modifiers=self._extract_modifiers(node),
            body=self._extract_statements(body) if body is not None else None,
            type_parameters=self._extract_type_parameters(node),
        )

    def _build_constructor(self, node: Any) -> ConstructorDeclaration:
        body = node.child_by_field_name("body")
        return ConstructorDeclaration(
            name=_text(node.child_by_field_name("name")),
            parameters=self._extract_parameters(node),
            modifiers=self._extract_modifiers(node),
            body=self._extract_statements(body) if body is not None else None,
            type_parameters=self._extract_type_parameters(node),
        )

    def _extract_type_parameters(self, node: Any) -> List[str]:
        """Names declared in ``<T, U extends Shape>``."""
        names = []
        for child in node.children:
            if child.type != "type_parameters":
                continue
            for parameter in child.named_children:
                if parameter.type != "type_parameter":
                    continue
                for part in parameter.named_children:
                    if part.type in ("type_identifier", "identifier"):
                        names.append(_text(part))
                        break
        return names

    def _extract_modifiers(self, node: Any) -> FrozenSet[Modifier]:
        modifiers = set()
        for child in node.children:
            if child.type != "modifiers":
                continue
            for keyword in child.children:
                # Annotations are named nodes; keywords are anonymous
                if keyword.is_named:
                    continue
                try:
                    modifiers.add(Modifier(keyword.type))
                except ValueError:
                    logger.debug(f"Unknown modifier: {keyword.type}")
        return frozenset(modifiers)

    def _extract_declarators(self, node: Any, declared_type: str) -> List[VariableDeclarator]:
        declarators = []
        for declarator in node.children_by_field_name("declarator"):
            dimensions = declarator.child_by_field_name("dimensions")
            value = declarator.child_by_field_name("value")
            declarators.append(
                VariableDeclarator(
                    name=_text(declarator.child_by_field_name("name")),
                    type=declared_type + _text(dimensions),
                    initializer=_text(value) if value is not None else None,
                )
            )
        return declarators

    def _extract_parameters(self, node: Any) -> List[Parameter]:
        parameters = []
        parameters_node = node.child_by_field_name("parameters")
        if parameters_node is None:
            return parameters

        for child in parameters_node.named_children:
            if child.type == "formal_parameter":
                parameters.append(
                    Parameter(
                        name=_text(child.child_by_field_name("name")),
                        type=_text(child.child_by_field_name("type"))
                        + _text(child.child_by_field_name("dimensions")),
                    )
                )
            elif child.type == "spread_parameter":
                # String... names
                type_node = None
                name = ""
                for part in child.named_children:
                    if part.type == "variable_declarator":
                        name = _text(part.child_by_field_name("name"))
                    elif type_node is None and part.type not in ("modifiers", "marker_annotation", "annotation"):
                        type_node = part
                parameters.append(Parameter(name=name, type=_text(type_node) + "..."))

        return parameters

    def _extract_statements(self, block: Any) -> List[Statement]:
        """Top-level statements of a method or constructor body."""
        statements: List[Statement] = []
        for statement in block.named_children:
            if statement.type in ("line_comment", "block_comment"):
                continue
            if statement.type == "local_variable_declaration":
                local_type = _text(statement.child_by_field_name("type"))
                statements.append(
                    LocalVariableDeclaration(
                        type=local_type,
                        declarators=self._extract_declarators(statement, local_type),
                        modifiers=self._extract_modifiers(statement),
                    )
                )
            else:
                statements.append(OtherStatement(node_type=statement.type))
        return statements

    def _find_error_node(self, node: Any) -> Optional[Any]:
        """Find the first ERROR or MISSING node, depth first."""
        if node.type == "ERROR" or node.is_missing:
            return node

        for child in node.children:
            if child.has_error or child.is_missing:
                found = self._find_error_node(child)
                if found is not None:
                    return found

        return None
