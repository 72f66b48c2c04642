# Copyright (c) 2023 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

"""
Various internal functionality used by the bindings module.
"""

from __future__ import annotations

import re
import typing
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    List,
    Literal,
    Mapping,
    Optional,
    Type,
    TypeVar,
    Union,
    overload,
)

import lxml.etree as ET
from lxml import objectify
from typing_extensions import Self

from .errors import EdcValueError, MalformedNumber, MissingAttribute, MissingElement

# Largest value representable by a 32 bit register or address.
U32_MAX = 0xFFFF_FFFF

_HEX_LITERAL = re.compile(r"0x([0-9a-fA-F]+)")
_DEC_LITERAL = re.compile(r"[0-9]+")
_BIN_LITERAL = re.compile(r"[01]+")

# Characters used in reset patterns for bits that are unimplemented (-), undefined (x) or
# unchanged (u) on reset. These are all treated as zero.
RESET_PLACEHOLDERS = ("-", "x", "u")


def to_int(number: str) -> int:
    """
    Convert a string representation of an integer following the EDC format to its corresponding
    integer representation.

    :param number: String representation of the integer, either "0x"-prefixed hexadecimal or
                   plain decimal.

    :raises MalformedNumber: If the string is neither, or the value does not fit in 32 bits.

    :return: Decoded integer.
    """
    if (match := _HEX_LITERAL.fullmatch(number)) is not None:
        value = int(match[1], base=16)
    elif _DEC_LITERAL.fullmatch(number) is not None:
        value = int(number, base=10)
    else:
        raise MalformedNumber(number)

    if value > U32_MAX:
        raise MalformedNumber(number)

    return value


# Name used for the address/width literal decoder in the public API.
parse_address_literal = to_int


def decode_reset_pattern(pattern: str) -> int:
    """
    Convert a reset value bit pattern to an integer.
    Placeholder bits (see RESET_PLACEHOLDERS) are mapped to 0.

    :param pattern: Bit pattern string, most significant bit first.

    :raises MalformedNumber: If the cleaned pattern is not a binary number of at most 32 bits.

    :return: Decoded reset value.
    """
    cleaned = pattern
    for placeholder in RESET_PLACEHOLDERS:
        cleaned = cleaned.replace(placeholder, "0")

    if _BIN_LITERAL.fullmatch(cleaned) is None:
        raise MalformedNumber(pattern)

    value = int(cleaned, base=2)
    if value > U32_MAX:
        raise MalformedNumber(pattern)

    return value


def local_name(element: ET._Element) -> str:
    """Tag of an element without its namespace."""
    return ET.QName(element).localname


class EdcElement(objectify.ObjectifiedElement):
    """Base class for all the EDC element classes."""

    TAG: str

    def __repr__(self) -> str:
        """
        A more informative string representation than the default one from lxml.
        This is mostly useful for the exception messages raised on conversion errors.
        """
        return self._repr()

    def _repr(
        self,
        props: Mapping[Any, Any] = MappingProxyType({}),
    ) -> str:
        """
        Default repr() implementation for the binding classes.
        """

        props = dict(props)
        if (name := get_attribute(self, "name")) is not None:
            props.setdefault("name", name)

        parent = self.getparent()
        if parent is not None:
            ancestors_str = f" in {parent!r}"
            try:
                child_index = parent.index(self)
            except Exception:
                child_index = None
        else:
            ancestors_str = ""
            child_index = None

        child_index_str = f"({child_index})" if child_index is not None else ""
        props_str = f" {props}" if props else ""
        self_repr = f"[{local_name(self)}{child_index_str}{props_str}]"

        return f"{self_repr}{ancestors_str}"


def get_attribute(node: ET._Element, name: str) -> Optional[str]:
    """
    Get an attribute by local name.
    EDC documents qualify attributes with the same namespace as the element, so the attribute is
    looked up both without a namespace and in the namespace of the element.
    """
    value = node.get(name)
    if value is None:
        namespace = ET.QName(node).namespace
        if namespace is not None:
            value = node.get(f"{{{namespace}}}{name}")
    return value


class _Missing:
    ...


# Sentinel value used to indicate that a default value is missing.
MISSING = _Missing()


O = TypeVar("O", bound=objectify.ObjectifiedElement)
T = TypeVar("T")


class Elem(Generic[T]):
    """Data descriptor class used to access a XML element."""

    def __init__(
        self,
        name: str,
        element_class: Type[objectify.ObjectifiedElement],
        /,
        *,
        default: Union[T, _Missing] = MISSING,
    ) -> None:
        """
        Create a data descriptor object that extracts the first child element with the given
        name from an XML node.

        :param name: Name of the element.
        :param element_class: Class expected for the extracted element.
        :param default: Default value to return if the element is not found.
        """
        self.name: str = name
        self.element_class: Type[objectify.ObjectifiedElement] = element_class
        self.default: Union[T, _Missing] = default

    @overload
    def __get__(self, node: Literal[None], owner: Optional[Type] = None) -> Self:
        ...

    @overload
    def __get__(self, node: O, owner: Optional[Type] = None) -> T:
        ...

    def __get__(self, node: Optional[O], owner: Any = None) -> Union[T, Self]:
        """Get the element from the given node."""
        if node is None:
            # If the node argument is None, we are being accessed through the class object.
            # In that case, return the descriptor itself.
            return self

        try:
            edc_obj = node.__getattr__(self.name)
        except AttributeError:
            if not isinstance(self.default, _Missing):
                return self.default
            raise MissingElement(self.name, node) from None

        return edc_obj  # type: ignore


class Attr(Generic[T]):
    """Data descriptor used to access a XML attribute."""

    def __init__(
        self,
        name: str,
        /,
        *,
        converter: Optional[Callable[[str], T]] = None,
        default: Union[T, _Missing] = MISSING,
    ) -> None:
        """
        Create a data descriptor object that extracts an attribute from an XML node.

        :param name: Local name of the attribute.
        :param converter: Optional callable that converts the attribute value from a string to
                          another type.
        :param default: Default value to return if the attribute is not found. The default is
                        returned as is, without being passed to the converter.
        """
        self.name: str = name
        self.converter: Optional[Callable[[str], T]] = converter
        self.default: Union[T, _Missing] = default

    @overload
    def __get__(self, node: Literal[None], owner: Optional[Type] = None) -> Self:
        ...

    @overload
    def __get__(self, node: O, owner: Optional[Type] = None) -> T:
        ...

    def __get__(self, node: Optional[O], owner: Any = None) -> Union[T, Self]:
        """Get the attribute value from the given node."""
        if node is None:
            # If the node argument is None, we are being accessed through the class object.
            # In that case, return the descriptor itself.
            return self

        value = get_attribute(node, self.name)

        if value is None:
            if not isinstance(self.default, _Missing):
                return self.default
            raise MissingAttribute(self.name, node)

        if self.converter is None:
            return value  # type: ignore

        try:
            return self.converter(value)
        except EdcValueError as e:
            raise e.located(f"attribute '{self.name}' of {node!r}") from None


C = TypeVar("C", bound=EdcElement)


class BindingRegistry:
    """Simple container for XML binding classes."""

    def __init__(self) -> None:
        self._element_classes: List[Type[EdcElement]] = []

    def add(
        self,
        element_class: Type[C],
        /,
    ) -> Type[C]:
        """
        Add a class to the binding registry.
        This is intended to be used as a class decorator.
        """
        self._element_classes.append(element_class)

        return element_class

    @property
    def bindings(self) -> List[Type[EdcElement]]:
        """Get the list of registered bindings."""
        return self._element_classes


def iter_element_children(
    element: Optional[objectify.ObjectifiedElement], *tags: str
) -> Iterable[objectify.ObjectifiedElement]:
    """
    Iterate over the child elements of an lxml element, optionally filtered by local tag name.
    If the element is None, an empty iterator is returned.
    """
    if element is None:
        return iter(())

    child_iter = (
        child
        for child in element.iterchildren()
        if isinstance(child.tag, str) and (not tags or local_name(child) in tags)
    )
    return typing.cast(Iterable[objectify.ObjectifiedElement], child_iter)
