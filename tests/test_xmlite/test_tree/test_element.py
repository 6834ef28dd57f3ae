"""Tests for the document tree model."""

import pytest

from xmlite.tree import AttributeRef, XMLDeclaration, XMLDocument, XMLElement


def sample_tree() -> XMLElement:
    """Build <a><b><d/></b><c/></a> by hand."""
    return XMLElement("a").with_child(
        XMLElement("b").with_child(XMLElement("d"))
    ).with_child(XMLElement("c"))


class TestXMLElement:
    """Test XMLElement construction and accessors."""

    def test_element_creation_with_valid_data(self) -> None:
        """Test creating XMLElement with valid data."""
        element = XMLElement("root", {"id": "test"}, text="content")

        assert element.name == "root"
        assert element.attributes == {"id": "test"}
        assert element.text == "content"
        assert element.children == []

    def test_element_defaults_are_independent(self) -> None:
        """Test that default containers are not shared."""
        first = XMLElement("a")
        second = XMLElement("b")
        first.set_attr("k", "v")
        first.add_child(XMLElement("c"))

        assert second.attributes == {}
        assert second.children == []

    def test_empty_name_raises_error(self) -> None:
        """Test that an empty name is rejected."""
        with pytest.raises(ValueError, match="Element name cannot be empty"):
            XMLElement("")

    def test_empty_attribute_name_raises_error(self) -> None:
        """Test that an empty attribute name is rejected."""
        with pytest.raises(ValueError, match="Attribute name cannot be empty"):
            XMLElement("a", {"": "v"})

    def test_name_accessor(self) -> None:
        """Test name access."""
        assert XMLElement("beans").name == "beans"

    def test_structural_equality(self) -> None:
        """Test that elements compare by content."""
        assert sample_tree() == sample_tree()
        assert sample_tree() != XMLElement("a")


class TestAttributeAccess:
    """Test attr and attr_mut."""

    def test_attr_present(self) -> None:
        """Test reading an existing attribute."""
        assert XMLElement("a", {"kind": "fava"}).attr("kind") == "fava"

    def test_attr_absent(self) -> None:
        """Test reading a missing attribute."""
        assert XMLElement("a").attr("kind") is None

    def test_attr_mut_writes_through(self) -> None:
        """Test that a write through attr_mut is visible via attr."""
        element = XMLElement("beans", {"kind": "fava"})

        handle = element.attr_mut("kind")
        handle.value = "lima"

        assert isinstance(handle, AttributeRef)
        assert handle.name == "kind"
        assert element.attr("kind") == "lima"

    def test_attr_mut_get_and_set(self) -> None:
        """Test method-style access on the handle."""
        element = XMLElement("a", {"k": "1"})
        handle = element.attr_mut("k")

        handle.set("2")

        assert handle.get() == "2"
        assert element.attributes == {"k": "2"}
        assert repr(handle) == "AttributeRef('k', '2')"

    def test_attr_mut_absent_returns_none(self) -> None:
        """Test that attr_mut never creates attributes."""
        element = XMLElement("a")

        assert element.attr_mut("k") is None
        assert element.attributes == {}

    def test_attr_mut_rejects_non_string(self) -> None:
        """Test attribute values must be strings."""
        handle = XMLElement("a", {"k": "1"}).attr_mut("k")

        with pytest.raises(TypeError, match="Attribute value must be a string"):
            handle.value = 2  # type: ignore[assignment]

    def test_set_attr_creates_attribute(self) -> None:
        """Test set_attr adds new attributes at the end."""
        element = XMLElement("a", {"x": "1"})
        element.set_attr("y", "2")

        assert list(element.attributes.items()) == [("x", "1"), ("y", "2")]

    def test_set_attr_validation(self) -> None:
        """Test set_attr argument validation."""
        element = XMLElement("a")

        with pytest.raises(TypeError, match="must be strings"):
            element.set_attr("k", 1)  # type: ignore[arg-type]
        with pytest.raises(ValueError, match="Attribute name cannot be empty"):
            element.set_attr("", "v")

    def test_with_attr_chains(self) -> None:
        """Test builder-style attribute setting."""
        element = XMLElement("div").with_attr("id", "main").with_attr("class", "wide")

        assert element.attributes == {"id": "main", "class": "wide"}


class TestChildAccess:
    """Test children iteration and lookup."""

    def test_iter_children_in_order(self) -> None:
        """Test children come back in document order."""
        names = [child.name for child in sample_tree().iter_children()]

        assert names == ["b", "c"]

    def test_iter_children_repeatable(self) -> None:
        """Test that iteration is restartable and unchanged."""
        tree = sample_tree()

        assert list(tree.iter_children()) == list(tree.iter_children())

    def test_iter_children_empty(self) -> None:
        """Test leaf elements."""
        assert list(XMLElement("leaf").iter_children()) == []

    def test_iter_children_mut_allows_in_place_changes(self) -> None:
        """Test modifying children during mutable iteration."""
        tree = sample_tree()

        for child in tree.iter_children_mut():
            child.set_attr("seen", "yes")

        assert [child.attr("seen") for child in tree.children] == ["yes", "yes"]

    def test_iter_children_mut_detects_structural_change(self) -> None:
        """Test that adding children while iterating is an error."""
        tree = sample_tree()

        with pytest.raises(RuntimeError, match="children changed size during iteration"):
            for _ in tree.iter_children_mut():
                tree.add_child(XMLElement("x"))

    def test_add_child_type_check(self) -> None:
        """Test adding a non-element raises TypeError."""
        with pytest.raises(TypeError, match="Child must be an XMLElement instance"):
            XMLElement("a").add_child("b")  # type: ignore[arg-type]

    def test_add_child_rejects_container(self) -> None:
        """Test that unnamed containers cannot be nested."""
        with pytest.raises(ValueError, match="cannot be nested"):
            XMLElement("a").add_child(XMLElement(None))

    def test_find_child_and_children(self) -> None:
        """Test direct child lookup."""
        element = XMLElement("list").with_child(XMLElement("item", {"n": "1"})).with_child(
            XMLElement("item", {"n": "2"})
        )

        assert element.find_child("item").attr("n") == "1"
        assert [child.attr("n") for child in element.find_children("item")] == ["1", "2"]
        assert element.find_child("missing") is None

    def test_find_searches_descendants(self) -> None:
        """Test recursive lookup excludes the element itself."""
        tree = sample_tree()

        assert tree.find("d").name == "d"
        assert tree.find("a") is None
        assert [element.name for element in tree.find_all("c")] == ["c"]


class TestTraversal:
    """Test depth-first traversal."""

    def test_iter_pre_order(self) -> None:
        """Test iteration order is parent first, children in order."""
        assert [element.name for element in sample_tree().iter()] == ["a", "b", "d", "c"]

    def test_descendants_exclude_self(self) -> None:
        """Test descendants iteration."""
        assert [element.name for element in sample_tree().descendants()] == ["b", "d", "c"]

    def test_deep_tree_traversal(self) -> None:
        """Test traversal does not recurse."""
        root = XMLElement("n")
        current = root
        for _ in range(5000):
            child = XMLElement("n")
            current.add_child(child)
            current = child

        assert sum(1 for _ in root.iter()) == 5001
        assert root.to_xml().count("<n>") == 5000

    def test_deep_tree_dict_equality_and_repr(self) -> None:
        """Test to_dict, == and repr on parsed deep documents."""
        from xmlite import parse_document

        depth = 5000
        text = "<n>" * depth + "</n>" * depth
        first = parse_document(text).root
        second = parse_document(text).root

        data = first.to_dict()
        for _ in range(depth - 1):
            data = data["children"][0]
        assert data == {"name": "n", "attributes": {}}

        assert first == second
        deepest = second
        while deepest.children:
            deepest = deepest.children[0]
        deepest.set_attr("k", "v")
        assert first != second

        assert repr(first) == "XMLElement(name='n', attributes={}, text='', children=<1 elements>)"


class TestEqualityAndRepr:
    """Test structural comparison and shallow repr."""

    def test_equality_compares_every_field(self) -> None:
        """Test name, attributes, text and children all matter."""
        base = XMLElement("a", {"k": "v"}, text="t").with_child(XMLElement("b"))

        assert base == XMLElement("a", {"k": "v"}, text="t").with_child(XMLElement("b"))
        assert base != XMLElement("x", {"k": "v"}, text="t").with_child(XMLElement("b"))
        assert base != XMLElement("a", {"k": "w"}, text="t").with_child(XMLElement("b"))
        assert base != XMLElement("a", {"k": "v"}, text="u").with_child(XMLElement("b"))
        assert base != XMLElement("a", {"k": "v"}, text="t").with_child(XMLElement("c"))
        assert base != XMLElement("a", {"k": "v"}, text="t")

    def test_equality_with_other_types(self) -> None:
        """Test comparison with non-elements."""
        assert XMLElement("a") != "a"

    def test_elements_are_unhashable(self) -> None:
        """Test mutable elements cannot be hashed."""
        with pytest.raises(TypeError):
            hash(XMLElement("a"))

    def test_repr_is_shallow(self) -> None:
        """Test repr summarizes children instead of expanding them."""
        assert repr(sample_tree()) == (
            "XMLElement(name='a', attributes={}, text='', children=<2 elements>)"
        )


class TestSerialization:
    """Test dictionary and XML output."""

    def test_to_dict(self) -> None:
        """Test dictionary representation."""
        element = XMLElement("a", {"k": "v"}, text="t").with_child(XMLElement("b"))

        assert element.to_dict() == {
            "name": "a",
            "attributes": {"k": "v"},
            "text": "t",
            "children": [{"name": "b", "attributes": {}}],
        }

    def test_to_xml_empty_element(self) -> None:
        """Test empty elements serialize as self-closing tags."""
        assert XMLElement("a", {"k": "v"}).to_xml() == '<a k="v"/>'

    def test_to_xml_escapes(self) -> None:
        """Test text and attribute escaping."""
        element = XMLElement("a", {"q": 'say "hi"'}, text="1 < 2 & 3")

        assert str(element) == '<a q="say &quot;hi&quot;">1 &lt; 2 &amp; 3</a>'

    def test_to_xml_nested(self) -> None:
        """Test text is written before children."""
        element = XMLElement("can", text="x").with_child(
            XMLElement("beans", {"kind": "fava"}, text="Cool Beans")
        ).with_child(XMLElement("sauce"))

        assert element.to_xml() == '<can>x<beans kind="fava">Cool Beans</beans><sauce/></can>'

    def test_to_xml_container(self) -> None:
        """Test unnamed containers serialize their content only."""
        container = XMLElement(None, text=" ").with_child(XMLElement("a")).with_child(XMLElement("b"))

        assert container.to_xml() == " <a/><b/>"


class TestXMLDeclaration:
    """Test the declaration marker."""

    def test_from_instruction(self) -> None:
        """Test pseudo-attribute extraction."""
        declaration = XMLDeclaration.from_instruction(
            "version=\"1.0\" encoding='UTF-8' standalone=\"yes\""
        )

        assert declaration.version == "1.0"
        assert declaration.encoding == "UTF-8"
        assert declaration.standalone == "yes"

    def test_empty_declaration(self) -> None:
        """Test a bare <?xml?> marker."""
        declaration = XMLDeclaration.from_instruction("")

        assert declaration.raw == ""
        assert declaration.version is None
        assert declaration.to_xml() == "<?xml?>"

    def test_to_xml_keeps_raw_content(self) -> None:
        """Test the marker is reproduced as read."""
        declaration = XMLDeclaration.from_instruction('version="1.0"')

        assert declaration.to_xml() == '<?xml version="1.0"?>'


class TestXMLDocument:
    """Test the document wrapper."""

    def test_document_requires_named_root(self) -> None:
        """Test root validation."""
        with pytest.raises(TypeError, match="Document root must be an XMLElement"):
            XMLDocument(root="a")  # type: ignore[arg-type]
        with pytest.raises(ValueError, match="Document root must be a named element"):
            XMLDocument(root=XMLElement(None))

    def test_document_navigation(self) -> None:
        """Test find and iteration include the root."""
        document = XMLDocument(root=sample_tree())

        assert document.find("a") is document.root
        assert [element.name for element in document.iter_elements()] == ["a", "b", "d", "c"]
        assert len(document.find_all("d")) == 1

    def test_document_serialization(self) -> None:
        """Test dictionary and XML output with a declaration."""
        document = XMLDocument(
            root=XMLElement("a"),
            declaration=XMLDeclaration.from_instruction('version="1.0"'),
        )

        assert document.to_xml() == '<?xml version="1.0"?><a/>'
        assert str(document) == document.to_xml()
        assert document.to_dict() == {
            "root": {"name": "a", "attributes": {}},
            "declaration": {"version": "1.0", "encoding": None, "standalone": None},
        }
