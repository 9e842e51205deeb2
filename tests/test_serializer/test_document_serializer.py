"""
Tests for GraphQL document serialization.
"""

from enum import Enum

import pytest

from graphql_dsl import (
    DanglingFragmentReference,
    DocumentSerializer,
    DuplicateFragmentName,
    EnumValue,
    SerializationError,
    Variable,
    fragment,
    mutation,
    query,
    serialize,
)


class Order(Enum):
    ASC = 1
    DESC = 2


CANONICAL = (
    "query {\n"
    "  catCollection(limit: 1) {\n"
    "    items {\n"
    "      name\n"
    "      likes\n"
    "    }\n"
    "  }\n"
    "}"
)


class TestOperationSerialization:
    """Test rendering of operations."""

    def test_canonical_example(self, cat_collection_query):
        """The catCollection query renders in the canonical shape."""
        assert serialize(cat_collection_query) == CANONICAL

    def test_deterministic(self, cat_collection_query):
        """Serializing twice yields identical text."""
        assert serialize(cat_collection_query) == serialize(cat_collection_query)

    def test_rebuilt_operation_serializes_identically(self):
        """Two separately built equal trees render the same bytes."""

        def build():
            with query() as q:
                with q.catCollection(limit=1):
                    with q.items:
                        q.name
                        q.likes
            return q.build()

        assert serialize(build()) == serialize(build()) == CANONICAL

    def test_order_preserved(self):
        """Fields render in declaration order."""
        with query() as q:
            q.c
            q.a
            q.b

        assert serialize(q.build()) == "query {\n  c\n  a\n  b\n}"

    def test_alias(self):
        """Aliases render before the field name."""
        with query() as q:
            with q.catCollection(limit=1).as_alias("cats"):
                q.total

        assert serialize(q.build()) == (
            "query {\n  cats: catCollection(limit: 1) {\n    total\n  }\n}"
        )

    def test_type_match(self):
        """on() renders as an inline fragment inside the field's block."""
        with query() as q:
            with q.pets:
                with q.on("Cat"):
                    q.name

        assert serialize(q.build()) == (
            "query {\n"
            "  pets {\n"
            "    ... on Cat {\n"
            "      name\n"
            "    }\n"
            "  }\n"
            "}"
        )

    def test_mutation_keyword(self):
        """Mutations use the mutation keyword."""
        with mutation() as m:
            with m.likeCat(id="7"):
                m.likes

        assert serialize(m.build()).startswith('mutation {\n  likeCat(id: "7") {')

    def test_operation_name_and_variables(self):
        """Operation names and variable definitions go in the header."""
        with query("CatById") as q:
            q.variable("id", "ID!")
            q.variable("limit", "Int", 10)
            with q.cat(id=Variable("id")):
                q.name

        assert serialize(q.build()) == (
            "query CatById($id: ID! $limit: Int = 10) {\n"
            "  cat(id: $id) {\n"
            "    name\n"
            "  }\n"
            "}"
        )

    def test_custom_indent(self):
        """The indentation unit is configurable."""
        with query() as q:
            with q.cat:
                q.name

        text = DocumentSerializer(indent="    ").serialize(q.build())

        assert text == "query {\n    cat {\n        name\n    }\n}"

    def test_operation_str(self, cat_collection_query):
        """str() of an operation is its document text."""
        assert str(cat_collection_query) == CANONICAL

    def test_unsupported_definition(self):
        """Only operations and fragments can be serialized."""
        with pytest.raises(SerializationError):
            serialize("query { a }")


class TestArgumentLiterals:
    """Test rendering of argument values."""

    def render_arguments(self, **arguments):
        with query() as q:
            q.field("f", arguments=arguments)
        text = serialize(q.build())
        return text[len("query {\n  f("):-len(")\n}")]

    def test_integer_renders_bare(self):
        """Integers render without quotes."""
        assert self.render_arguments(limit=1) == "limit: 1"

    def test_string_quoted_and_escaped(self):
        """Strings are quoted with quotes, backslashes and newlines escaped."""
        assert self.render_arguments(text='say "hi"\\\n') == r'text: "say \"hi\"\\\n"'

    def test_unicode_string(self):
        """Non-ASCII characters stay readable."""
        assert self.render_arguments(name="Mäuschen") == 'name: "Mäuschen"'

    def test_float_boolean_null(self):
        """Floats, booleans and null render bare."""
        assert self.render_arguments(weight=4.5, indoor=True, owner=None) == (
            "weight: 4.5 indoor: true owner: null"
        )

    def test_list(self):
        """Lists render bracketed."""
        assert self.render_arguments(ids=[1, 2, 3]) == "ids: [1 2 3]"

    def test_nested_mapping(self):
        """Mappings render as brace-delimited input objects."""
        assert self.render_arguments(where={"name": "Tom", "age": {"gt": 2}}) == (
            'where: {name: "Tom" age: {gt: 2}}'
        )

    def test_enum_values(self):
        """Enum values render as bare identifiers."""
        assert self.render_arguments(order=EnumValue("DESC"), by=Order.ASC) == (
            "order: DESC by: ASC"
        )

    def test_arguments_space_separated(self):
        """Arguments are separated by spaces, without commas."""
        assert self.render_arguments(skip=0, limit=10) == "skip: 0 limit: 10"


class TestFragmentSerialization:
    """Test fragment closure rendering."""

    def test_spread_appends_fragment_block(self, cat_fragment):
        """A spread renders as ...Name with the fragment appended."""
        with query() as q:
            with q.cat:
                q.spread(cat_fragment)

        assert serialize(q.build()) == (
            "query {\n"
            "  cat {\n"
            "    ...CatInfo\n"
            "  }\n"
            "}\n"
            "\n"
            "fragment CatInfo on Cat {\n"
            "  name\n"
            "  likes\n"
            "}"
        )

    def test_fragment_deduplicated(self, cat_fragment):
        """Spreading the same fragment twice emits one block."""
        with query() as q:
            with q.cat:
                q.spread(cat_fragment)
            with q.favouriteCat:
                q.spread(cat_fragment)

        text = serialize(q.build())

        assert text.count("fragment CatInfo on Cat {") == 1
        assert text.count("...CatInfo") == 2

    def test_equal_fragments_rebuilt_are_one(self):
        """Fragments rebuilt with the same body count as one."""

        def build():
            with fragment("CatInfo", "Cat") as f:
                f.name
            return f.build()

        with query() as q:
            with q.cat:
                q.spread(build())
            with q.otherCat:
                q.spread(build())

        assert serialize(q.build()).count("fragment CatInfo on Cat") == 1

    def test_nested_fragments_first_reference_order(self, cat_fragment):
        """Fragments reached through other fragments follow, once each."""
        with fragment("DogInfo", "Dog") as f:
            f.name
        dog_fragment = f.build()

        with fragment("OwnerInfo", "Owner") as f:
            f.name
            with f.cats:
                f.spread(cat_fragment)
        owner_fragment = f.build()

        with query() as q:
            with q.owner:
                q.spread(owner_fragment)
            with q.dog:
                q.spread(dog_fragment)
            with q.cat:
                q.spread(cat_fragment)

        text = serialize(q.build())
        headers = [line for line in text.splitlines() if line.startswith("fragment ")]

        assert headers == [
            "fragment OwnerInfo on Owner {",
            "fragment DogInfo on Dog {",
            "fragment CatInfo on Cat {",
        ]

    def test_spread_inside_inline_fragment(self, cat_fragment):
        """Spreads nested in type conditions are collected too."""
        with query() as q:
            with q.pets:
                with q.on("Cat"):
                    q.spread(cat_fragment)

        assert "fragment CatInfo on Cat {" in serialize(q.build())

    def test_spread_by_name_with_supplied_fragment(self, cat_fragment):
        """Name-only spreads resolve against supplied fragments."""
        with query() as q:
            with q.cat:
                q.spread("CatInfo")

        text = serialize(q.build(), fragments=[cat_fragment])

        assert text.endswith("fragment CatInfo on Cat {\n  name\n  likes\n}")

    def test_supplied_but_unreferenced_fragment_not_emitted(self, cat_fragment):
        """Only referenced fragments are appended."""
        with query() as q:
            q.count

        assert serialize(q.build(), fragments=[cat_fragment]) == "query {\n  count\n}"

    def test_dangling_reference(self):
        """A spread naming an unknown fragment fails."""
        with query() as q:
            with q.cat:
                q.spread("Missing")

        with pytest.raises(DanglingFragmentReference) as exc_info:
            serialize(q.build())

        assert exc_info.value.fragment_name == "Missing"

    def test_duplicate_name_with_different_body(self, cat_fragment):
        """Two different fragments with one name fail."""
        with fragment("CatInfo", "Cat") as f:
            f.id
        other = f.build()

        with query() as q:
            with q.cat:
                q.spread(cat_fragment)
            with q.otherCat:
                q.spread(other)

        with pytest.raises(DuplicateFragmentName) as exc_info:
            serialize(q.build())

        assert exc_info.value.fragment_name == "CatInfo"

    def test_duplicate_against_supplied_fragment(self, cat_fragment):
        """Supplied fragments take part in duplicate detection."""
        with fragment("CatInfo", "Cat") as f:
            f.id
        other = f.build()

        with query() as q:
            with q.cat:
                q.spread(cat_fragment)

        with pytest.raises(DuplicateFragmentName):
            serialize(q.build(), fragments=[other])

    def test_serialize_fragment_alone(self, cat_fragment):
        """A fragment renders with the fragments it spreads."""
        with fragment("OwnerInfo", "Owner") as f:
            with f.cats:
                f.spread(cat_fragment)

        assert serialize(f.build()) == (
            "fragment OwnerInfo on Owner {\n"
            "  cats {\n"
            "    ...CatInfo\n"
            "  }\n"
            "}\n"
            "\n"
            "fragment CatInfo on Cat {\n"
            "  name\n"
            "  likes\n"
            "}"
        )

    def test_literal_with_fragment_deterministic(self, cat_fragment):
        """Documents with fragments are stable across calls."""
        with query() as q:
            with q.catCollection(where={"name": "Tom"}, limit=1):
                with q.items:
                    q.spread(cat_fragment)
        operation = q.build()

        assert serialize(operation) == serialize(operation)


class TestFragmentIdentity:
    """Test when two fragments with one name count as the same fragment."""

    def build_toys_fragment(self, flag):
        with fragment("CatInfo", "Cat") as f:
            f.toys(flag=flag)
        return f.build()

    def spread_both(self, first, second):
        with query() as q:
            with q.cat:
                q.spread(first)
            with q.otherCat:
                q.spread(second)
        return q.build()

    @pytest.mark.parametrize(
        "first, second",
        [(True, 1), (1, 1.0), (False, 0), (0, None), ("1", 1)],
    )
    def test_scalars_of_different_type_conflict(self, first, second):
        """Bodies whose literals differ only in type are different fragments."""
        operation = self.spread_both(
            self.build_toys_fragment(first), self.build_toys_fragment(second)
        )

        with pytest.raises(DuplicateFragmentName):
            serialize(operation)

    def test_nested_literal_types_conflict(self):
        """Type differences inside lists and input objects are detected."""
        with fragment("CatInfo", "Cat") as f:
            f.toys(where={"ids": [1, True]})
        first = f.build()
        with fragment("CatInfo", "Cat") as f:
            f.toys(where={"ids": [1, 1]})
        second = f.build()

        with pytest.raises(DuplicateFragmentName):
            serialize(self.spread_both(first, second))

    def test_same_typed_literals_dedupe(self):
        """Identical literals still dedupe to one block."""
        operation = self.spread_both(
            self.build_toys_fragment(True), self.build_toys_fragment(True)
        )

        text = serialize(operation)

        assert text.count("fragment CatInfo on Cat {") == 1
        assert "toys(flag: true)" in text

    def build_outer(self, inner_reference):
        with fragment("Outer", "Owner") as f:
            with f.cats:
                f.spread(inner_reference)
        return f.build()

    def test_spread_by_value_equals_spread_by_name(self):
        """A spread by Fragment value and one by name render alike and dedupe."""
        with fragment("Inner", "Cat") as f:
            f.name
        inner = f.build()

        by_value = self.build_outer(inner)
        by_name = self.build_outer("Inner")

        assert by_value == by_name
        assert hash(by_value) == hash(by_name)

        text = serialize(self.spread_both(by_value, by_name))

        assert text.count("fragment Outer on Owner {") == 1
        assert text.count("fragment Inner on Cat {") == 1

    def test_by_name_copy_first_uses_carried_fragment(self):
        """The body carried by a later equal copy resolves an earlier by-name spread."""
        with fragment("Inner", "Cat") as f:
            f.name
        inner = f.build()

        text = serialize(self.spread_both(self.build_outer("Inner"), self.build_outer(inner)))

        assert text.endswith("fragment Inner on Cat {\n  name\n}")

    def test_conflicting_inner_body_still_detected(self):
        """A supplied fragment that differs from a carried one conflicts."""
        with fragment("Inner", "Cat") as f:
            f.name
        inner = f.build()
        with fragment("Inner", "Cat") as f:
            f.id
        other_inner = f.build()

        with query() as q:
            with q.owner:
                q.spread(self.build_outer(inner))

        with pytest.raises(DuplicateFragmentName) as exc_info:
            serialize(q.build(), fragments=[other_inner])

        assert exc_info.value.fragment_name == "Inner"
