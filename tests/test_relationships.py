"""Tests for relationship inference."""

from class_diagram.extractor.java_syntax import LocalVariableDeclaration, VariableDeclarator
from class_diagram.extractor.models import RelationshipKind, UMLMethod, UMLVariable, VariableKind


def make_variable(classifier, name, type_name, kind=VariableKind.FIELD):
    return UMLVariable(name=name, type=type_name, type_ref=classifier.classify(type_name), kind=kind)


def edges(umlclass):
    return [(r.target.name, r.kind) for r in umlclass.relationships]


class TestLinkFromVariable:
    def test_user_type_field_creates_association(self, registry, inferencer, classifier):
        a = registry.get_or_create("A")
        inferencer.link_from_variable(a, make_variable(classifier, "b", "B"))
        assert edges(a) == [("B", RelationshipKind.ASSOCIATION)]
        assert a.relationships[0].target is registry.get("B")

    def test_primitive_and_library_fields_are_ignored(self, registry, inferencer, classifier):
        a = registry.get_or_create("A")
        for name, type_name in [("x", "int"), ("s", "String"), ("flags", "boolean[]")]:
            inferencer.link_from_variable(a, make_variable(classifier, name, type_name))
        assert a.relationships == []
        assert len(registry) == 1

    def test_self_typed_field_creates_no_edge(self, registry, inferencer, classifier):
        node = registry.get_or_create("Node")
        inferencer.link_from_variable(node, make_variable(classifier, "next", "Node"))
        assert node.relationships == []

    def test_two_fields_of_same_type_give_one_edge(self, registry, inferencer, classifier):
        a = registry.get_or_create("A")
        inferencer.link_from_variable(a, make_variable(classifier, "first", "B"))
        inferencer.link_from_variable(a, make_variable(classifier, "second", "B"))
        assert len(a.relationships) == 1

    def test_collection_field_carries_multiplicity(self, registry, inferencer, classifier):
        order = registry.get_or_create("Order")
        inferencer.link_from_variable(order, make_variable(classifier, "items", "List<Item>"))
        assert order.relationships[0].target.name == "Item"
        assert order.relationships[0].multiplicity == "*"


class TestLinkFromMethodAndLocal:
    def test_user_typed_parameters_create_associations(self, registry, inferencer, classifier):
        a = registry.get_or_create("A")
        method = UMLMethod(
            name="move",
            parameters=[
                make_variable(classifier, "to", "Point", VariableKind.PARAMETER),
                make_variable(classifier, "steps", "int", VariableKind.PARAMETER),
            ],
            return_type="void",
        )
        inferencer.link_from_method(a, method)
        assert edges(a) == [("Point", RelationshipKind.ASSOCIATION)]

    def test_method_without_parameters_creates_nothing(self, registry, inferencer):
        a = registry.get_or_create("A")
        inferencer.link_from_method(a, UMLMethod(name="run", return_type="void"))
        assert a.relationships == []

    def test_local_declaration_creates_association_per_declarator(self, registry, inferencer):
        a = registry.get_or_create("A")
        declaration = LocalVariableDeclaration(
            type="Point",
            declarators=[VariableDeclarator("p", "Point"), VariableDeclarator("grid", "Cell[]")],
        )
        inferencer.link_from_local(a, declaration)
        assert edges(a) == [
            ("Point", RelationshipKind.ASSOCIATION),
            ("Cell", RelationshipKind.ASSOCIATION),
        ]

    def test_local_of_type_variable_creates_nothing(self, registry, inferencer):
        box = registry.get_or_create("Box")
        declaration = LocalVariableDeclaration(
            type="T",
            declarators=[VariableDeclarator("copy", "T"), VariableDeclarator("all", "T[]")],
        )
        inferencer.link_from_local(box, declaration, {"T", "U"})
        assert box.relationships == []
        assert "T" not in registry


class TestSupertypes:
    def test_supertypes_are_pending_until_resolved(self, registry, inferencer):
        circle = registry.get_or_create("Circle")
        inferencer.link_supertypes(circle, ["Figure", "Shape"])
        assert {r.kind for r in circle.relationships} == {RelationshipKind.INHERITS_OR_IMPLEMENTS}

        registry.get_or_create("Shape").is_interface = True
        assert inferencer.resolve_supertypes() == 2
        assert edges(circle) == [
            ("Figure", RelationshipKind.GENERALIZATION),
            ("Shape", RelationshipKind.REALIZATION),
        ]

    def test_resolution_is_reevaluated_when_interface_appears_later(self, registry, inferencer):
        circle = registry.get_or_create("Circle")
        inferencer.link_supertypes(circle, ["Shape"])
        inferencer.resolve_supertypes()
        assert edges(circle) == [("Shape", RelationshipKind.GENERALIZATION)]

        registry.get_or_create("Shape").is_interface = True
        inferencer.resolve_supertypes()
        assert edges(circle) == [("Shape", RelationshipKind.REALIZATION)]

    def test_builtin_and_generic_supertypes(self, registry, inferencer):
        point = registry.get_or_create("Point")
        inferencer.link_supertypes(point, ["Comparable<Point>", "java.io.Serializable", "Base<Point>"])
        inferencer.resolve_supertypes()
        assert edges(point) == [("Base", RelationshipKind.GENERALIZATION)]
        assert "Comparable" not in registry
        assert "Serializable" not in registry

    def test_supertype_and_association_to_same_class_are_kept(self, registry, inferencer, classifier):
        child = registry.get_or_create("Child")
        inferencer.link_supertypes(child, ["Parent"])
        inferencer.link_from_variable(child, make_variable(classifier, "parent", "Parent"))
        inferencer.resolve_supertypes()
        assert edges(child) == [
            ("Parent", RelationshipKind.GENERALIZATION),
            ("Parent", RelationshipKind.ASSOCIATION),
        ]
