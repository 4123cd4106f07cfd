"""Tests for the Element tree model.

Covers construction, navigation, index handling, attachment atomicity,
cycle rejection and deep cloning.
"""

import pytest

from element_query.tree import CyclicTreeError, Element, IndexOutOfRangeError


def build_xyz() -> Element:
    parent = Element("parent")
    for tag in ("x", "y", "z"):
        parent.create_child(tag)
    return parent


class TestElementCreation:
    """Test Element construction and validation."""

    def test_element_creation_with_valid_data(self) -> None:
        """Test creating an Element with tag, attributes and text."""
        element = Element("root", {"id": "test"}, text="content", tail="after")

        assert element.tag == "root"
        assert dict(element.attributes) == {"id": "test"}
        assert element.text == "content"
        assert element.tail == "after"
        assert element.parent is None
        assert element.children == ()

    def test_empty_tag_raises_error(self) -> None:
        """Test that an empty tag raises ValueError."""
        with pytest.raises(ValueError, match="Element tag cannot be empty"):
            Element("")

    def test_non_string_tag_raises_error(self) -> None:
        """Test that a non-string tag raises TypeError."""
        with pytest.raises(TypeError, match="Element tag must be a string"):
            Element(42)  # type: ignore

    def test_non_string_attribute_raises_error(self) -> None:
        """Test that non-string attribute values are rejected."""
        with pytest.raises(TypeError, match="Attribute name and value must be strings"):
            Element("a", {"n": 1})  # type: ignore

    def test_attributes_are_copied_on_creation(self) -> None:
        """Test that the caller's mapping is not shared with the element."""
        source = {"k": "v"}
        element = Element("a", source)
        source["k"] = "changed"

        assert element.get_attribute("k") == "v"

    def test_equality_is_identity(self) -> None:
        """Test that equal content does not make two elements equal."""
        first = Element("a", {"k": "v"})
        second = Element("a", {"k": "v"})

        assert first != second
        assert first == first
        assert len({first, second}) == 2


class TestNavigation:
    """Test child, parent and root accessors."""

    def test_children_view_is_read_only(self) -> None:
        """Test that children are exposed as an immutable tuple."""
        parent = build_xyz()

        assert isinstance(parent.children, tuple)
        assert [c.tag for c in parent.children] == ["x", "y", "z"]

    def test_child_positive_and_negative_indices(self) -> None:
        """Test index normalization for negative values."""
        parent = build_xyz()

        assert parent.child(0).tag == "x"
        assert parent.child(2).tag == "z"
        assert parent.child(-1).tag == "z"
        assert parent.child(-3).tag == "x"

    @pytest.mark.parametrize("index", [3, -4, 100])
    def test_child_out_of_range_raises_error(self, index: int) -> None:
        """Test indices outside [-n, n) raise IndexOutOfRangeError."""
        parent = build_xyz()

        with pytest.raises(IndexOutOfRangeError) as exc_info:
            parent.child(index)

        assert exc_info.value.index == index
        assert exc_info.value.size == 3

    def test_index_error_is_index_error(self) -> None:
        """Test that IndexOutOfRangeError can be caught as IndexError."""
        with pytest.raises(IndexError):
            Element("empty").child(0)

    def test_first_and_last_child(self) -> None:
        """Test first/last child accessors including the empty case."""
        parent = build_xyz()
        empty = Element("empty")

        assert parent.first_child.tag == "x"
        assert parent.last_child.tag == "z"
        assert empty.first_child is None
        assert empty.last_child is None

    def test_root_and_depth(self) -> None:
        """Test root walk and depth calculation."""
        root = Element("root")
        b = root.create_child("b")
        c = b.create_child("c")

        assert c.root is root
        assert root.root is root
        assert c.get_depth() == 2
        assert root.get_depth() == 0

    def test_get_attribute_returns_none_when_missing(self) -> None:
        """Test missing attributes are not errors."""
        element = Element("a", {"k": "v"})

        assert element.get_attribute("k") == "v"
        assert element.get_attribute("missing") is None
        assert element.get_attribute("missing", "fallback") == "fallback"
        assert element.has_attribute("k")
        assert not element.has_attribute("missing")

    def test_iter_is_pre_order(self) -> None:
        """Test iter yields self then descendants in document order."""
        root = Element("root")
        a = root.create_child("a")
        a.create_child("a1")
        a.create_child("a2")
        root.create_child("b").create_child("b1")

        assert [e.tag for e in root.iter()] == ["root", "a", "a1", "a2", "b", "b1"]


class TestAttributes:
    """Test attribute mutation helpers."""

    def test_set_attribute_is_chainable(self) -> None:
        """Test set_attribute returns the element."""
        element = Element("a").set_attribute("x", "1").set_attribute("y", "2")

        assert dict(element.attributes) == {"x": "1", "y": "2"}

    def test_set_attribute_rejects_non_strings(self) -> None:
        """Test set_attribute type validation."""
        with pytest.raises(TypeError):
            Element("a").set_attribute("x", None)  # type: ignore

    def test_set_namespace(self) -> None:
        """Test default and prefixed namespace declarations."""
        element = Element("kml").set_namespace("http://earth.google.com/kml/2.2")
        element.set_namespace("http://ecommerce.example.org/schema", prefix="edi")

        assert element.get_attribute("xmlns") == "http://earth.google.com/kml/2.2"
        assert element.get_attribute("xmlns:edi") == "http://ecommerce.example.org/schema"

    def test_attributes_view_is_read_only(self) -> None:
        """Test the attribute mapping rejects direct writes."""
        element = Element("x", {"k": "v"})

        with pytest.raises(TypeError):
            element.attributes["n"] = 1  # type: ignore
        with pytest.raises(TypeError):
            del element.attributes["k"]  # type: ignore

        assert dict(element.attributes) == {"k": "v"}

    def test_attributes_and_tag_cannot_be_reassigned(self) -> None:
        """Test validated fields cannot be replaced after construction."""
        element = Element("x", {"k": "v"})

        with pytest.raises(AttributeError):
            element.attributes = None  # type: ignore
        with pytest.raises(AttributeError):
            element.tag = ""  # type: ignore

        assert element.tag == "x"
        assert element.get_attribute("k") == "v"

    def test_attributes_view_tracks_set_attribute(self) -> None:
        """Test the view reflects later writes made through set_attribute."""
        element = Element("x")
        view = element.attributes

        element.set_attribute("n", "1")

        assert view["n"] == "1"
        assert element.find_all("/.[@n='1']") == [element]

    def test_remove_attribute(self) -> None:
        """Test removal reports whether the attribute existed."""
        element = Element("x", {"k": "v"})

        assert element.remove_attribute("k") is True
        assert element.remove_attribute("k") is False
        assert not element.has_attribute("k")


class TestAttachment:
    """Test add_child, insert_child and remove_child."""

    def test_add_child_establishes_parent_relationship(self) -> None:
        """Test both sides of the link are set."""
        parent = Element("parent")
        child = Element("child")

        result = parent.add_child(child)

        assert result is parent
        assert parent.children == (child,)
        assert child.parent is parent

    def test_add_child_at_position(self) -> None:
        """Test insertion at a given index."""
        parent = build_xyz()
        w = Element("w")

        parent.add_child(w, 0)
        parent.insert_child(4, Element("end"))

        assert [c.tag for c in parent.children] == ["w", "x", "y", "z", "end"]

    def test_add_child_with_invalid_type_raises_error(self) -> None:
        """Test adding a non-Element raises TypeError."""
        with pytest.raises(TypeError, match="Child must be an Element instance"):
            Element("parent").add_child("not_an_element")  # type: ignore

    @pytest.mark.parametrize("position", [-1, 4, 10])
    def test_out_of_range_position_mutates_nothing(self, position: int) -> None:
        """Test a rejected insert leaves both the parent and the child unchanged."""
        parent = build_xyz()
        old_parent = Element("old")
        child = old_parent.create_child("moving")

        with pytest.raises(IndexOutOfRangeError):
            parent.add_child(child, position)

        assert [c.tag for c in parent.children] == ["x", "y", "z"]
        assert child.parent is old_parent
        assert old_parent.children == (child,)

    def test_add_child_moves_from_previous_parent(self) -> None:
        """Test a node belongs to one parent at a time."""
        first = Element("first")
        second = Element("second")
        child = first.create_child("child")

        second.add_child(child)

        assert first.children == ()
        assert second.children == (child,)
        assert child.parent is second

    def test_reattach_within_same_parent_reorders(self) -> None:
        """Test moving a child to another position of the same parent."""
        parent = build_xyz()
        z = parent.child(-1)

        parent.add_child(z, 0)

        assert [c.tag for c in parent.children] == ["z", "x", "y"]
        assert z.parent is parent

    def test_attach_self_raises_cycle_error(self) -> None:
        """Test an element cannot become its own child."""
        element = Element("a")

        with pytest.raises(CyclicTreeError):
            element.add_child(element)

        assert element.children == ()
        assert element.parent is None

    def test_attach_ancestor_raises_cycle_error(self) -> None:
        """Test attaching an ancestor under its descendant is rejected atomically."""
        root = Element("root")
        b = root.create_child("b")
        c = b.create_child("c")

        with pytest.raises(CyclicTreeError):
            c.add_child(root)

        assert root.parent is None
        assert c.children == ()
        assert b.parent is root

    def test_remove_child_clears_parent_relationship(self) -> None:
        """Test removal detaches both sides."""
        parent = build_xyz()
        y = parent.child(1)

        assert parent.remove_child(y) is True
        assert y.parent is None
        assert [c.tag for c in parent.children] == ["x", "z"]

    def test_remove_nonexistent_child_returns_false(self) -> None:
        """Test removing a stranger returns False."""
        assert Element("parent").remove_child(Element("child")) is False

    def test_remove_child_uses_identity(self) -> None:
        """Test a lookalike node is not removed in place of the real child."""
        parent = Element("parent")
        real = parent.create_child("c", {"k": "v"})
        lookalike = Element("c", {"k": "v"})

        assert parent.remove_child(lookalike) is False
        assert parent.children == (real,)


class TestClone:
    """Test deep clone semantics."""

    def test_clone_copies_tag_attributes_and_text(self) -> None:
        """Test the clone carries the same data in new containers."""
        original = Element("a", {"k": "v"}, text="t", tail="tail")
        copy = original.clone()

        assert copy is not original
        assert copy.tag == "a"
        assert dict(copy.attributes) == {"k": "v"}
        assert copy.text == "t"
        assert copy.tail == "tail"

        copy.set_attribute("k", "changed")
        assert original.get_attribute("k") == "v"

    def test_clone_is_deep_and_detached(self) -> None:
        """Test children are cloned, not shared, and the clone has no parent."""
        root = Element("root")
        b = root.create_child("b")
        c = b.create_child("c", {"id": "1"})

        copy = b.clone()

        assert copy.parent is None
        assert [e.tag for e in copy.iter()] == ["b", "c"]
        assert copy.first_child is not c
        assert copy.first_child.parent is copy

        copy.first_child.set_attribute("id", "2")
        assert c.get_attribute("id") == "1"
        assert b.children == (c,)

    def test_clone_preserves_child_order(self) -> None:
        """Test document order survives cloning."""
        copy = build_xyz().clone()

        assert [c.tag for c in copy.children] == ["x", "y", "z"]
