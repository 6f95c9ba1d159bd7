"""Shared fixtures for the extraction tests."""

from pathlib import Path
from typing import Callable

import pytest

from class_diagram.extractor.grammars import LanguageConfig, get_language_registry
from class_diagram.extractor.java_parser import ClassDiagramExtractor
from class_diagram.extractor.java_syntax import JavaSyntaxProvider
from class_diagram.extractor.registry import ClassRegistry
from class_diagram.extractor.relationships import RelationshipInferencer
from class_diagram.extractor.type_classifier import TypeClassifier


@pytest.fixture(scope="session")
def java_config() -> LanguageConfig:
    config = get_language_registry().get_language_config("java")
    assert config is not None
    return config


@pytest.fixture(scope="session")
def classifier(java_config) -> TypeClassifier:
    return TypeClassifier(java_config)


@pytest.fixture(scope="session")
def provider(java_config) -> JavaSyntaxProvider:
    return JavaSyntaxProvider(config=java_config)


@pytest.fixture
def registry() -> ClassRegistry:
    return ClassRegistry()


@pytest.fixture
def inferencer(registry, classifier) -> RelationshipInferencer:
    return RelationshipInferencer(registry, classifier)


@pytest.fixture
def extractor(registry, provider, classifier) -> ClassDiagramExtractor:
    return ClassDiagramExtractor(registry=registry, syntax_provider=provider, classifier=classifier)


@pytest.fixture
def write_java(tmp_path) -> Callable[[str, str], Path]:
    """Write a Java source file under tmp_path and return its path."""

    def _write(name: str, source: str) -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write
