"""Language configuration for class extraction with tree-sitter."""

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "languages.json"


class LanguageConfig:
    """Configuration for a programming language."""

    def __init__(
        self,
        name: str,
        tree_sitter_language: str,
        builtin_types: List[str],
        container_types: List[str],
        type_declarations: Dict[str, str],
    ):
        """Initialize language configuration.

        Args:
            name: Language name (java)
            tree_sitter_language: Tree-sitter language identifier
            builtin_types: Type names that never denote a class under analysis
            container_types: Collection types classified by their element type
            type_declarations: Mapping of AST node types to declaration kinds
        """
        self.name = name
        self.tree_sitter_language = tree_sitter_language
        self.builtin_types = frozenset(builtin_types)
        self.container_types = frozenset(container_types)
        self.type_declarations = type_declarations

    def is_builtin_type(self, type_name: str) -> bool:
        return type_name in self.builtin_types

    def is_container_type(self, type_name: str) -> bool:
        return type_name in self.container_types

    def get_declaration_kind(self, node_type: str) -> Optional[str]:
        """Get the declaration kind for a top-level AST node type.

        Args:
            node_type: AST node type

        Returns:
            Declaration kind ("class", "interface", "enum", ...) or None
        """
        return self.type_declarations.get(node_type)


class LanguageRegistry:
    """Registry of language configurations."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize language registry.

        Args:
            config_path: Path to languages.json config file
        """
        if config_path is None:
            config_path = Path(os.getenv("CLASS_DIAGRAM_LANGUAGES", str(DEFAULT_CONFIG_PATH)))

        self.config_path = Path(config_path)
        self.languages: Dict[str, LanguageConfig] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load language configurations from JSON file."""
        try:
            with open(self.config_path, "r") as f:
                config_data = json.load(f)

            for lang_name, lang_config in config_data.items():
                language = LanguageConfig(
                    name=lang_name,
                    tree_sitter_language=lang_config["tree_sitter_language"],
                    builtin_types=lang_config.get("builtin_types", []),
                    container_types=lang_config.get("container_types", []),
                    type_declarations=lang_config.get("type_declarations", {}),
                )
                self.languages[lang_name] = language

            logger.info(f"Loaded {len(self.languages)} language configurations")

        except Exception as e:
            logger.error(f"Error loading language config from {self.config_path}: {e}")
            raise

    def get_language_config(self, language: str) -> Optional[LanguageConfig]:
        """Get configuration for a specific language.

        Args:
            language: Language name

        Returns:
            Language configuration or None if not found
        """
        return self.languages.get(language)


# Global registry instance
_registry: Optional[LanguageRegistry] = None


def get_language_registry(config_path: Optional[Path] = None) -> LanguageRegistry:
    """Get the global language registry instance.

    Args:
        config_path: Path to config file (only used on first call)

    Returns:
        Language registry instance
    """
    global _registry
    if _registry is None:
        _registry = LanguageRegistry(config_path)
    return _registry
