"""Tests for the run-scoped class registry and the entity model."""

import pytest

from class_diagram.extractor.models import Relationship, RelationshipKind, UMLClass
from class_diagram.extractor.registry import ClassRegistry


class TestClassRegistry:
    def test_get_or_create_returns_same_instance(self, registry):
        first = registry.get_or_create("Order")
        registry.get_or_create("Customer")
        registry.get_or_create("Item")
        assert registry.get_or_create("Order") is first
        assert len(registry) == 3

    def test_new_class_is_empty_placeholder(self, registry):
        umlclass = registry.get_or_create("Order")
        assert umlclass.is_interface is False
        assert umlclass.methods == []
        assert umlclass.variables == []
        assert umlclass.relationships == []
        assert umlclass.declared is False

    def test_all_classes_lists_only_published_in_registration_order(self, registry):
        order = registry.get_or_create("Order")
        customer = registry.get_or_create("Customer")
        registry.get_or_create("Library")
        registry.publish(customer)
        registry.publish(order)
        registry.publish(order)

        assert registry.all_classes() == [order, customer]
        assert [c.name for c in registry.all_classes(include_placeholders=True)] == [
            "Order",
            "Customer",
            "Library",
        ]
        assert [c.name for c in registry.placeholders()] == ["Library"]

    def test_publish_ignores_foreign_duplicate(self, registry):
        registered = registry.get_or_create("Order")
        registry.publish(UMLClass(name="Order"))
        assert registered.declared is False
        assert registry.get("Order") is registered

    def test_lookup_helpers(self, registry):
        registry.get_or_create("Order")
        assert "Order" in registry
        assert "Missing" not in registry
        assert registry.get("Missing") is None
        assert [c.name for c in registry] == ["Order"]

    def test_runs_do_not_share_identity(self):
        assert ClassRegistry().get_or_create("A") is not ClassRegistry().get_or_create("A")


class TestUMLClass:
    def test_name_is_immutable(self):
        umlclass = UMLClass(name="Order")
        with pytest.raises(AttributeError):
            umlclass.name = "Other"

    def test_duplicate_edges_collapse(self):
        a, b = UMLClass(name="A"), UMLClass(name="B")
        assert a.add_relationship(Relationship(a, b, RelationshipKind.ASSOCIATION)) is True
        assert a.add_relationship(Relationship(a, b, RelationshipKind.ASSOCIATION, "*")) is False
        assert a.relationships[0].multiplicity is None

    def test_different_kinds_are_separate_edges(self):
        a, b = UMLClass(name="A"), UMLClass(name="B")
        a.add_relationship(Relationship(a, b, RelationshipKind.ASSOCIATION))
        a.add_relationship(Relationship(a, b, RelationshipKind.GENERALIZATION))
        assert len(a.relationships) == 2
        assert len(a.get_relationships(RelationshipKind.GENERALIZATION)) == 1

    def test_self_edge_is_rejected(self):
        a = UMLClass(name="A")
        with pytest.raises(ValueError):
            Relationship(a, a, RelationshipKind.ASSOCIATION)

    def test_edge_must_start_at_owner(self):
        a, b, c = UMLClass(name="A"), UMLClass(name="B"), UMLClass(name="C")
        with pytest.raises(ValueError):
            a.add_relationship(Relationship(b, c, RelationshipKind.ASSOCIATION))

    def test_relationship_repr(self):
        a, b = UMLClass(name="A"), UMLClass(name="B")
        assert repr(Relationship(a, b, RelationshipKind.ASSOCIATION, "*")) == "A -> B (association) [*]"
