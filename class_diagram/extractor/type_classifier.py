"""Classification of raw type tokens into user types and built-in types."""

import re
from dataclasses import dataclass
from typing import Collection, List, Optional, Tuple

from .grammars import LanguageConfig, get_language_registry

MANY = "*"

_ANNOTATION = re.compile(r"@[\w.]+(\([^)]*\))?\s*")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class TypeRef:
    """Result of classifying a type token."""

    is_user_type: bool
    simple_name: str
    multiplicity: Optional[str] = None  # "*" for arrays and collections


def split_type_arguments(arguments: str) -> List[str]:
    """Split the inside of ``<...>`` on top-level commas."""
    parts = []
    depth = 0
    current = []
    for char in arguments:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def parse_type(raw_type: str) -> Tuple[str, List[str], bool]:
    """Break a type token into (simple base name, type arguments, is_array).

    ``java.util.List<a.B>[]`` gives ``("List", ["a.B"], True)``.
    """
    token = _ANNOTATION.sub("", raw_type or "")
    token = _WHITESPACE.sub(" ", token).strip()

    is_array = False
    while True:
        if token.endswith("..."):
            token = token[:-3].rstrip()
        elif token.endswith("]") and "[" in token:
            token = token[: token.rindex("[")].rstrip()
        else:
            break
        is_array = True

    if token.startswith("?"):
        bound = token[1:].strip()
        for keyword in ("extends ", "super "):
            if bound.startswith(keyword):
                return parse_type(bound[len(keyword):])
        return "?", [], is_array

    arguments: List[str] = []
    if "<" in token and token.endswith(">"):
        start = token.index("<")
        arguments = split_type_arguments(token[start + 1 : -1])
        token = token[:start]

    return token.strip().split(".")[-1], arguments, is_array


class TypeClassifier:
    """Decide whether a type token refers to a class under analysis."""

    def __init__(self, config: Optional[LanguageConfig] = None):
        """Initialize the classifier.

        Args:
            config: Language configuration holding built-in and container
                type names. Defaults to the registered Java configuration.
        """
        if config is None:
            config = get_language_registry().get_language_config("java")
        if config is None:
            raise ValueError("No Java language configuration available")
        self.config = config

    def simple_name(self, raw_type: str) -> str:
        """Return the base simple name, ignoring any type arguments."""
        return parse_type(raw_type)[0]

    def is_user_type(self, raw_type: str, type_parameters: Collection[str] = ()) -> bool:
        return self.classify(raw_type, type_parameters).is_user_type

    def classify(self, raw_type: str, type_parameters: Collection[str] = ()) -> TypeRef:
        """Classify a raw type token.

        A generic type is classified by its first type argument that is a
        user type; the container's own name is then not a class reference.
        Arrays, varargs and known collection containers carry a ``*``
        multiplicity.

        Args:
            raw_type: Type token as written in source (e.g. ``List<Point>``)
            type_parameters: Type variables in scope (``T`` in ``class Box<T>``),
                which never denote a class

        Returns:
            TypeRef describing the referenced class, if any
        """
        base, arguments, is_array = parse_type(raw_type)

        for argument in arguments:
            element = self.classify(argument, type_parameters)
            if element.is_user_type:
                many = (
                    is_array
                    or self.config.is_container_type(base)
                    or element.multiplicity == MANY
                )
                return TypeRef(True, element.simple_name, MANY if many else None)

        if not base or self.config.is_builtin_type(base) or base in type_parameters:
            return TypeRef(False, base)

        return TypeRef(True, base, MANY if is_array else None)


_default_classifier: Optional[TypeClassifier] = None


def classify(raw_type: str) -> TypeRef:
    """Classify a type token with the default Java configuration."""
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = TypeClassifier()
    return _default_classifier.classify(raw_type)
