# Copyright (c) 2023 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

"""
Read-only Python representation of the parts of the EDC format that are needed to produce an SVD
description. Each type of element used from the EDC XML tree is represented by a class in this
module. The class properties correspond more or less directly to the XML elements/attributes,
with some abstractions and simplifications added for convenience.

EDC documents put both elements and attributes in the "edc" namespace. The bindings look elements
and attributes up by local name, so documents with or without the namespace are accepted.
"""

from __future__ import annotations

import enum
import typing
from typing import Iterator, Optional

from ._bindings import (
    Attr,
    BindingRegistry,
    EdcElement,
    Elem,
    decode_reset_pattern,
    iter_element_children,
    to_int,
)
from .errors import UnrecognizedPortalsSpec

# Container for classes that represent elements in the EDC XML tree.
BINDING_REGISTRY = BindingRegistry()

# Alias for the BINDING_REGISTRY.add for convenience.
binding = BINDING_REGISTRY.add

# Alias for the BINDING_REGISTRY.bindings for convenience.
BINDINGS = BINDING_REGISTRY.bindings


@enum.unique
class Portals(enum.Enum):
    """
    Atomic bit manipulation registers ("portals") that accompany a SFR.
    See the "portals" attribute of SFRDef elements.
    """

    # Only the register itself.
    NONE = "- - -"
    # The register and a CLR register at offset +0x4.
    CLR = "CLR - -"
    # The register and CLR, SET and INV registers at offsets +0x4, +0x8 and +0xC.
    CLR_SET_INV = "CLR SET INV"

    @property
    def has_clr(self) -> bool:
        return self is not Portals.NONE

    @property
    def has_set(self) -> bool:
        return self is Portals.CLR_SET_INV

    @property
    def has_inv(self) -> bool:
        return self is Portals.CLR_SET_INV


def decode_portals(text: str) -> Portals:
    """
    Convert a portals attribute string to a Portals value.

    :param text: One of the literal forms "CLR SET INV", "CLR - -" or "- - -".

    :raises UnrecognizedPortalsSpec: If the string is not one of the literal forms.

    :return: Decoded portals.
    """
    try:
        return Portals(text)
    except ValueError:
        raise UnrecognizedPortalsSpec(text) from None


@binding
class SfrFieldDefElement(EdcElement):
    """Definition of a bit field within a SFR mode."""

    TAG: str = "SFRFieldDef"

    # Display name of the field.
    name: Attr[str] = Attr("name")

    # Canonical name of the field. Used as the field name in the output.
    cname: Attr[str] = Attr("cname")

    # Width of the field in bits.
    width: Attr[int] = Attr("nzwidth", converter=to_int)


@binding
class AdjustPointElement(EdcElement):
    """Gap between bit fields within a SFR mode."""

    TAG: str = "AdjustPoint"

    # Number of bits to skip.
    offset: Attr[int] = Attr("offset", converter=to_int)


@binding
class SfrModeElement(EdcElement):
    """A field layout variant of a SFR."""

    TAG: str = "SFRMode"

    # Identifier of the mode, e.g. "DS.0".
    mode_id: Attr[Optional[str]] = Attr("id", default=None)

    @property
    def entries(self) -> Iterator[EdcElement]:
        """
        Iterate over all child elements in document order.
        These are expected to be SFRFieldDef and AdjustPoint elements, but are not checked here.
        """
        return typing.cast(Iterator[EdcElement], iter(iter_element_children(self)))


@binding
class SfrModeListElement(EdcElement):
    """Container for the field layout variants of a SFR."""

    TAG: str = "SFRModeList"

    # (internal) First mode of the list.
    _mode: Elem[SfrModeElement] = Elem("SFRMode", SfrModeElement)


@binding
class SfrDefElement(EdcElement):
    """Definition of a special function register (SFR)."""

    TAG: str = "SFRDef"

    # Display name of the register.
    name: Attr[str] = Attr("name")

    # Canonical name of the register. Expected to equal the display name.
    cname: Attr[str] = Attr("cname")

    # Physical address of the register.
    address: Attr[int] = Attr("_addr", converter=to_int)

    # Value of the register after a master clear reset.
    reset_value: Attr[int] = Attr("mclr", converter=decode_reset_pattern)

    # Atomic bit manipulation registers that accompany the register.
    portals: Attr[Portals] = Attr("portals", converter=decode_portals, default=Portals.NONE)

    # Name of the peripheral if this register is the first one of the peripheral.
    base_of_peripheral: Attr[Optional[str]] = Attr("baseofperipheral", default=None)

    # Name of the peripheral the register belongs to.
    member_of_peripheral: Attr[Optional[str]] = Attr("memberofperipheral", default=None)

    # Register group name.
    group: Attr[Optional[str]] = Attr("grp", default=None)

    # Identifier of the design module the register was generated from.
    module_source: Attr[Optional[str]] = Attr("_modsrc", default=None)

    @property
    def first_mode(self) -> SfrModeElement:
        """The first field layout variant of the register."""
        return self._mode_list._mode

    # (internal) Field layout variants.
    _mode_list: Elem[SfrModeListElement] = Elem("SFRModeList", SfrModeListElement)


@binding
class SfrDataSectorElement(EdcElement):
    """Region of the data address space containing SFRs."""

    TAG: str = "SFRDataSector"

    # Identifier of the region, e.g. "periph" or "sfrs".
    region_id: Attr[str] = Attr("regionid", default="")

    @property
    def sfr_defs(self) -> Iterator[SfrDefElement]:
        """Iterate over the SFR definitions in the region, in document order."""
        it = iter_element_children(self, SfrDefElement.TAG)
        return typing.cast(Iterator[SfrDefElement], iter(it))


@binding
class PhysicalSpaceElement(EdcElement):
    """Physical address space of the device."""

    TAG: str = "PhysicalSpace"

    @property
    def data_sectors(self) -> Iterator[SfrDataSectorElement]:
        """Iterate over the SFR data sectors, in document order."""
        it = iter_element_children(self, SfrDataSectorElement.TAG)
        return typing.cast(Iterator[SfrDataSectorElement], iter(it))


@binding
class EdcDeviceElement(EdcElement):
    """Root element of an EDC document."""

    TAG: str = "PIC"

    # Name of the device.
    name: Attr[str] = Attr("name")

    # Physical address space of the device.
    physical_space: Elem[PhysicalSpaceElement] = Elem(
        "PhysicalSpace", PhysicalSpaceElement
    )
