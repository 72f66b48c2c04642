# Copyright (c) 2023 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

"""
Creation of output registers, including the atomic CLR/SET/INV register variants.
"""

from __future__ import annotations

from typing import List, Tuple

import edc2svd

from .bindings import Portals
from .device import SvdPeripheral, SvdRegister
from .layout import FieldLayout

# Name suffix and offset relative to the base register of each portal register.
PORTAL_CLR: Tuple[str, int] = ("CLR", 0x4)
PORTAL_SET: Tuple[str, int] = ("SET", 0x8)
PORTAL_INV: Tuple[str, int] = ("INV", 0xC)


def portal_variants(portals: Portals) -> List[Tuple[str, int]]:
    """Name suffixes and relative offsets of the portal registers described by portals."""
    variants = []
    if portals.has_clr:
        variants.append(PORTAL_CLR)
    if portals.has_set:
        variants.append(PORTAL_SET)
    if portals.has_inv:
        variants.append(PORTAL_INV)
    return variants


def add_register(
    peripheral: SvdPeripheral,
    name: str,
    offset: int,
    reset_value: int,
    layout: FieldLayout,
    portals: Portals = Portals.NONE,
) -> List[SvdRegister]:
    """
    Append a register and its portal registers to a peripheral.

    The portal registers share the field layout of the register. Since reading a portal register
    has an undefined result, their reset value is 0.

    :param peripheral: Peripheral to append the registers to.
    :param name: Name of the register.
    :param offset: Offset of the register relative to the peripheral base address.
    :param reset_value: Reset value of the register.
    :param layout: Field layout of the register.
    :param portals: Portal registers to add along with the register.

    :return: The registers that were appended, base register first.
    """
    fields = layout.fields if layout.has_fields else None

    registers = [SvdRegister(name=name, offset=offset, reset_value=reset_value, fields=fields)]

    for suffix, portal_offset in portal_variants(portals):
        portal = SvdRegister(
            name=f"{name}{suffix}",
            offset=offset + portal_offset,
            reset_value=0,
            fields=fields,
        )
        edc2svd.log.info(
            f"\t{portal.name}: {peripheral.base_address + portal.offset:x}, "
            f"offset = {portal.offset:x}"
        )
        registers.append(portal)

    for register in registers:
        peripheral.append(register)

    return registers
