# Copyright (c) 2023 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

"""
In-memory representation of the SVD device produced by the conversion.
This representation only covers the parts of the SVD format that can be derived from an EDC file:
peripherals with a base address, 32 bit registers with a reset value, and bit fields.

The objects here are populated incrementally while the EDC document is traversed, and do not hold
any references to the input document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Size of every register, in bits.
REGISTER_SIZE = 32


@dataclass(frozen=True)
class SvdField:
    """A bit field of a register."""

    name: str
    lsb: int
    width: int

    @property
    def msb(self) -> int:
        """Index of the most significant bit of the field."""
        return self.lsb + self.width - 1

    @property
    def bit_range(self) -> str:
        """Bit range in the SVD "[msb:lsb]" notation."""
        return f"[{self.msb}:{self.lsb}]"


@dataclass(frozen=True)
class SvdRegister:
    """A register of a peripheral."""

    name: str
    # Offset of the register relative to the peripheral base address.
    offset: int
    reset_value: int
    # None if no field information is available for the register.
    fields: Optional[Tuple[SvdField, ...]] = None
    size: int = REGISTER_SIZE

    @property
    def description(self) -> str:
        return f"{self.name} register"


@dataclass
class SvdPeripheral:
    """A peripheral of the device, with registers in the order they were added."""

    name: str
    base_address: int
    registers: List[SvdRegister] = field(default_factory=list)

    @property
    def description(self) -> str:
        return f"{self.name} peripheral"

    def append(self, register: SvdRegister) -> None:
        self.registers.append(register)

    def __str__(self) -> str:
        return f"{self.name} @ 0x{self.base_address:08x}"


@dataclass
class SvdDevice:
    """An SVD device, with peripherals in the order they were discovered."""

    name: str
    peripherals: List[SvdPeripheral] = field(default_factory=list)

    def add_peripheral(self, name: str, base_address: int) -> SvdPeripheral:
        """
        Create a new, empty peripheral and append it to the device.

        :param name: Name of the peripheral.
        :param base_address: Base address of the peripheral.

        :return: The new peripheral.
        """
        peripheral = SvdPeripheral(name=name, base_address=base_address)
        self.peripherals.append(peripheral)
        return peripheral

    def has_peripheral(self, name: str) -> bool:
        """True if a peripheral with the given name has already been added."""
        return any(p.name == name for p in self.peripherals)

    def register_count(self) -> int:
        """Total number of registers in the device."""
        return sum(len(p.registers) for p in self.peripherals)
