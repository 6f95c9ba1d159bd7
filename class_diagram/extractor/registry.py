"""Run-scoped registry of class entities keyed by simple name."""

import logging
from typing import Dict, Iterator, List, Optional

from .models import UMLClass

logger = logging.getLogger(__name__)


class ClassRegistry:
    """Lookup-or-create store guaranteeing one UMLClass per name.

    A class can be referenced (as a supertype, field, parameter or local
    type) before its own declaration is parsed; both roles resolve to the
    same instance. Create a new registry for every independent run.
    """

    def __init__(self):
        self._classes: Dict[str, UMLClass] = {}

    def get_or_create(self, name: str) -> UMLClass:
        """Return the class registered under ``name``, creating it if needed.

        Args:
            name: Simple class name

        Returns:
            The single UMLClass for this name
        """
        umlclass = self._classes.get(name)
        if umlclass is None:
            umlclass = UMLClass(name=name)
            self._classes[name] = umlclass
            logger.debug(f"Registered class {name}")
        return umlclass

    def publish(self, umlclass: UMLClass) -> None:
        """Mark a class as declared so it appears in ``all_classes()``."""
        registered = self._classes.setdefault(umlclass.name, umlclass)
        if registered is not umlclass:
            logger.warning(f"Ignoring publish of unregistered duplicate class {umlclass.name}")
            return
        umlclass.declared = True

    def get(self, name: str) -> Optional[UMLClass]:
        return self._classes.get(name)

    def all_classes(self, include_placeholders: bool = False) -> List[UMLClass]:
        """Get classes in first-registration order.

        Args:
            include_placeholders: Also return classes that were referenced
                but never declared (e.g. library superclasses)

        Returns:
            List of classes
        """
        return [
            umlclass
            for umlclass in self._classes.values()
            if include_placeholders or umlclass.declared
        ]

    def placeholders(self) -> List[UMLClass]:
        return [umlclass for umlclass in self._classes.values() if not umlclass.declared]

    def __contains__(self, name: object) -> bool:
        return name in self._classes

    def __len__(self) -> int:
        return len(self._classes)

    def __iter__(self) -> Iterator[UMLClass]:
        return iter(self._classes.values())
