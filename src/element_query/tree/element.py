"""Element tree data model.

An :class:`Element` owns its children exclusively and keeps a non-owning
reference to its parent. All structural mutation goes through
:meth:`Element.add_child` and :meth:`Element.remove_child`, which keep the two
sides of every link consistent and refuse to create cycles. Attributes are
exposed as a read-only view and written only through
:meth:`Element.set_attribute`.
"""

from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, Optional, Tuple, Union

if TYPE_CHECKING:
    from element_query.path import CompiledPath


class IndexOutOfRangeError(IndexError):
    """Raised when a child index falls outside the children sequence."""

    def __init__(self, index: int, size: int, message: Optional[str] = None) -> None:
        self.index = index
        self.size = size
        super().__init__(
            message or f"Child index {index} out of range for {size} children"
        )


class CyclicTreeError(ValueError):
    """Raised when attaching a node would make it its own ancestor."""


def _check_attribute(name: str, value: str) -> None:
    if not isinstance(name, str) or not isinstance(value, str):
        raise TypeError("Attribute name and value must be strings")


class Element:
    """A single element of the document tree.

    Equality and hashing are by identity, so elements can key dictionaries and
    sets without comparing content. ``tag`` and ``attributes`` are read-only;
    ``text`` and ``tail`` are plain mutable fields.

    Examples:
        >>> root = Element("root")
        >>> b = root.create_child("b")
        >>> b.parent is root
        True
        >>> root.find("b") is b
        True
    """

    __slots__ = ("_tag", "_attributes", "text", "tail", "_children", "_parent")

    def __init__(
        self,
        tag: str,
        attributes: Optional[Mapping[str, str]] = None,
        text: Optional[str] = None,
        tail: Optional[str] = None,
    ) -> None:
        """Validate the tag and take a private copy of the attributes.

        Raises:
            TypeError: if ``tag`` or an attribute name or value is not a string
            ValueError: if ``tag`` is empty
        """
        if not isinstance(tag, str):
            raise TypeError("Element tag must be a string")
        if not tag:
            raise ValueError("Element tag cannot be empty")

        own_attributes = dict(attributes or {})
        for name, value in own_attributes.items():
            _check_attribute(name, value)

        self._tag = tag
        self._attributes: Dict[str, str] = own_attributes
        self.text = text
        self.tail = tail
        self._children: List["Element"] = []
        self._parent: Optional["Element"] = None

    def __repr__(self) -> str:
        return (
            f"Element(tag={self._tag!r}, attributes={self._attributes!r}, "
            f"text={self.text!r}, tail={self.tail!r})"
        )

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def attributes(self) -> Mapping[str, str]:
        """Read-only view of the attributes; use :meth:`set_attribute` to write."""
        return MappingProxyType(self._attributes)

    # Navigation

    @property
    def children(self) -> Tuple["Element", ...]:
        """Read-only snapshot of the children in document order."""
        return tuple(self._children)

    @property
    def parent(self) -> Optional["Element"]:
        return self._parent

    @property
    def root(self) -> "Element":
        """The ancestor with no parent, possibly this element itself."""
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    @property
    def first_child(self) -> Optional["Element"]:
        return self._children[0] if self._children else None

    @property
    def last_child(self) -> Optional["Element"]:
        return self._children[-1] if self._children else None

    def child(self, index: int) -> "Element":
        """Return the child at ``index``; negative values count from the end.

        Raises:
            IndexOutOfRangeError: if ``index`` is outside ``[-n, n)``
        """
        size = len(self._children)
        normalized = index + size if index < 0 else index
        if not (0 <= normalized < size):
            raise IndexOutOfRangeError(index, size)
        return self._children[normalized]

    def get_depth(self) -> int:
        """Get depth of this element in the tree (root = 0)."""
        depth = 0
        node = self._parent
        while node is not None:
            depth += 1
            node = node._parent
        return depth

    def is_ancestor_of(self, other: "Element") -> bool:
        """Check whether this element is a proper ancestor of ``other``."""
        node = other._parent
        while node is not None:
            if node is self:
                return True
            node = node._parent
        return False

    def iter(self) -> Iterator["Element"]:
        """Yield this element and all descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    # Attributes

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self._attributes.get(name, default)

    def has_attribute(self, name: str) -> bool:
        """Check if element has specific attribute."""
        return name in self._attributes

    def set_attribute(self, name: str, value: str) -> "Element":
        """Set attribute value and return this element for chaining."""
        _check_attribute(name, value)
        self._attributes[name] = value
        return self

    def remove_attribute(self, name: str) -> bool:
        """Remove an attribute; return whether it was present."""
        return self._attributes.pop(name, None) is not None

    def set_namespace(self, uri: str, prefix: Optional[str] = None) -> "Element":
        """Declare a namespace as an ``xmlns`` or ``xmlns:prefix`` attribute."""
        name = "xmlns" if prefix is None else f"xmlns:{prefix}"
        return self.set_attribute(name, uri)

    # Mutation

    def add_child(self, child: "Element", position: Optional[int] = None) -> "Element":
        """Attach ``child`` at the end or at ``position``.

        A child that already has a parent is moved. Every check runs before
        either side is modified, so a failed call leaves both trees intact.

        Raises:
            TypeError: if ``child`` is not an Element
            IndexOutOfRangeError: if ``position`` is outside ``[0, n]``
            CyclicTreeError: if ``child`` is this element or one of its ancestors
        """
        if not isinstance(child, Element):
            raise TypeError("Child must be an Element instance")

        size = len(self._children)
        if child._parent is self:
            size -= 1
        if position is not None and not (0 <= position <= size):
            raise IndexOutOfRangeError(
                position, size, f"Insert position {position} out of range [0, {size}]"
            )
        if child is self or child.is_ancestor_of(self):
            raise CyclicTreeError(
                f"Cannot attach <{child.tag}> beneath itself or its descendant <{self.tag}>"
            )

        if child._parent is not None:
            child._parent._detach(child)
        child._parent = self
        if position is None:
            self._children.append(child)
        else:
            self._children.insert(position, child)
        return self

    def insert_child(self, index: int, child: "Element") -> "Element":
        """Insert child element at specific index."""
        return self.add_child(child, index)

    def create_child(
        self,
        tag: str,
        attributes: Optional[Dict[str, str]] = None,
        text: Optional[str] = None,
    ) -> "Element":
        """Create a new element, append it and return the new child."""
        child = Element(tag, attributes or {}, text=text)
        self.add_child(child)
        return child

    def remove_child(self, child: "Element") -> bool:
        """Remove a child element and clear its parent reference."""
        if not isinstance(child, Element) or child._parent is not self:
            return False
        self._detach(child)
        child._parent = None
        return True

    def _detach(self, child: "Element") -> None:
        for index, candidate in enumerate(self._children):
            if candidate is child:
                del self._children[index]
                return

    def clone(self) -> "Element":
        """Return a deep, detached copy of this subtree.

        Attributes are copied, never shared, and every descendant is cloned,
        so mutating the copy cannot affect the original.
        """
        copy_root = self._copy_node()
        stack = [(self, copy_root)]
        while stack:
            source, target = stack.pop()
            for child in source._children:
                child_copy = child._copy_node()
                child_copy._parent = target
                target._children.append(child_copy)
                stack.append((child, child_copy))
        return copy_root

    def _copy_node(self) -> "Element":
        return Element(self._tag, self._attributes, text=self.text, tail=self.tail)

    # Queries

    def find_all(self, path: Union[str, "CompiledPath"]) -> List["Element"]:
        """Find all elements selected by a path expression.

        Supports ``( . | .. | / | // | * | tag | [tag] | [@attr] | [@attr='value'] )+``.
        """
        # Imported here to avoid a circular dependency with the api package
        from element_query.api import get_default_matcher
        return get_default_matcher().find_all(self, path)

    def find(self, path: Union[str, "CompiledPath"]) -> Optional["Element"]:
        """Return the first element selected by ``path`` or ``None``."""
        results = self.find_all(path)
        return results[0] if results else None

    def find_text(
        self,
        path: Union[str, "CompiledPath"],
        default: Optional[str] = None,
    ) -> Optional[str]:
        """Return the text of the first element selected by ``path``.

        ``default`` is returned only when nothing matches; a match without
        text yields ``None``.
        """
        found = self.find(path)
        if found is None:
            return default
        return found.text
