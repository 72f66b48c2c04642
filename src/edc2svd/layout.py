# Copyright (c) 2023 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

"""
Computation of register bit field layouts from EDC mode blocks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Tuple

import edc2svd

from ._bindings import local_name
from .bindings import AdjustPointElement, SfrFieldDefElement, SfrModeElement
from .device import REGISTER_SIZE, SvdField
from .errors import FieldOverflow, UnexpectedFieldEntry

if TYPE_CHECKING:
    from .parsing import Options


@dataclass(frozen=True)
class FieldLayout:
    """Bit fields of a register together with the number of bits they span."""

    fields: Tuple[SvdField, ...]

    # Final position of the bit cursor, including any gaps.
    bit_count: int

    @property
    def has_fields(self) -> bool:
        """
        False if no field information is available, in which case the register is emitted
        without a fields element.
        """
        return self.bit_count > 0


def build_field_layout(mode: SfrModeElement, options: Options) -> FieldLayout:
    """
    Lay out the fields of a mode block, starting from bit 0.

    Fields are placed one after another in the order they are defined. AdjustPoint entries
    insert gaps between fields.

    :param mode: Mode block to lay out.
    :param options: Conversion options.

    :raises UnexpectedFieldEntry: If the mode block contains an unknown entry.
    :raises FieldOverflow: If the fields span more than the register width and
                           options.strict_field_width is set.

    :return: Laid out fields.
    """
    fields: List[SvdField] = []
    bit_pos = 0

    for entry in mode.entries:
        if isinstance(entry, SfrFieldDefElement):
            field_name = entry.cname
            if field_name != entry.name:
                edc2svd.log.warning(f"cname = {field_name} but name = {entry.name}")

            width = entry.width
            if width == 0:
                edc2svd.log.warning(f"Skipping zero width field {field_name} in {mode!r}")
                continue

            field = SvdField(name=field_name, lsb=bit_pos, width=width)
            edc2svd.log.debug(f"\t\t{field.bit_range}\t{field_name}")
            fields.append(field)
            bit_pos += width

        elif isinstance(entry, AdjustPointElement):
            bit_pos += entry.offset

        else:
            raise UnexpectedFieldEntry(
                [mode], f"Unexpected element {local_name(entry)} in field definition"
            )

    if bit_pos > REGISTER_SIZE:
        message = f"Fields span {bit_pos} bits, which exceeds the register size"
        if options.strict_field_width:
            raise FieldOverflow([mode], message)
        edc2svd.log.warning(f"{message}: {mode!r}")

    return FieldLayout(fields=tuple(fields), bit_count=bit_pos)
