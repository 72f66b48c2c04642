# Copyright (c) 2023 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

"""
Inference of peripherals from the flat list of SFR definitions in an EDC document.

EDC files do not describe peripherals explicitly. Instead, each SFR carries one or more hint
attributes naming the peripheral it belongs to. SFRs are listed in ascending address order with the
registers of a peripheral next to each other, so a peripheral is a run of consecutive SFRs with the
same inferred label, based at the address of the first SFR in the run. Each data sector is
grouped independently, so base addresses only need to increase within a sector.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional

import edc2svd

from .bindings import EdcDeviceElement, SfrDefElement
from .device import SvdDevice, SvdPeripheral, SvdRegister
from .errors import AddressOrderingViolation, MissingPeripheralHint, NameMismatch
from .layout import build_field_layout
from .registers import add_register

if TYPE_CHECKING:
    from .parsing import Options


# Peripheral labels for SFRs that are only identified by the module they were generated from.
MODULE_SOURCE_PERIPHERALS: Mapping[str, str] = MappingProxyType(
    {
        "DOS-01618_RPINRx.Module": "PPS",
        "DOS-01618_RPORx.Module": "PPS",
        "DOS-01423_RPINRx.Module": "PPS",
        "DOS-01423_RPORx.Module": "PPS",
        # Deep sleep controller
        "DOS-01475_lpwr_deep_sleep_ctrl_v2.Module": "DSCTRL",
    }
)


def infer_peripheral_name(
    sfr: SfrDefElement,
    module_source_peripherals: Mapping[str, str] = MODULE_SOURCE_PERIPHERALS,
) -> str:
    """
    Infer the label of the peripheral a SFR belongs to.

    The first available hint is used, in this order: baseofperipheral, memberofperipheral
    (unless empty), grp, and finally _modsrc looked up in module_source_peripherals.
    Only the first word of the hint is used.

    :param sfr: SFR definition.
    :param module_source_peripherals: Mapping from module source identifier to peripheral label.

    :raises MissingPeripheralHint: If the SFR has no hint, or the hint resolves to an empty label.

    :return: Peripheral label.
    """
    member_of_peripheral = sfr.member_of_peripheral or None

    if sfr.base_of_peripheral is not None:
        hint = sfr.base_of_peripheral
    elif member_of_peripheral is not None:
        hint = member_of_peripheral
    elif sfr.group is not None:
        hint = sfr.group
    elif sfr.module_source is not None:
        hint = module_source_peripherals.get(sfr.module_source, "")
    else:
        raise MissingPeripheralHint([sfr], f"Missing peripheral for {sfr.name}")

    words = hint.split()
    if not words:
        raise MissingPeripheralHint([sfr], f"Empty peripheral info for {sfr.name}")

    return words[0]


class PeripheralGrouper:
    """
    Assigns SFRs to peripherals of an output device, one SFR at a time.

    A new peripheral is opened whenever the inferred label differs from the label of the currently
    open peripheral. The base addresses of successive peripherals must strictly increase.
    A grouper covers a single data sector.
    """

    def __init__(self, device: SvdDevice, options: Options) -> None:
        """
        :param device: Device to add peripherals and registers to.
        :param options: Conversion options.
        """
        self._device: SvdDevice = device
        self._options: Options = options
        self._module_source_peripherals: Dict[str, str] = {
            **MODULE_SOURCE_PERIPHERALS,
            **options.module_source_peripherals,
        }
        self._current: Optional[SvdPeripheral] = None

    @property
    def current_peripheral(self) -> Optional[SvdPeripheral]:
        """The peripheral registers are currently added to, if any."""
        return self._current

    def add(self, sfr: SfrDefElement) -> List[SvdRegister]:
        """
        Add a SFR, and its portal registers, to the device.

        :param sfr: SFR definition.

        :return: The registers that were added.
        """
        address = sfr.address | self._options.address_segment_mask

        name = sfr.name
        if name != sfr.cname:
            raise NameMismatch(
                [sfr], f"Register name {name} does not match canonical name {sfr.cname}"
            )

        portals = sfr.portals
        reset_value = sfr.reset_value
        peripheral_name = infer_peripheral_name(sfr, self._module_source_peripherals)
        mode = sfr.first_mode

        if self._current is None or peripheral_name != self._current.name:
            self._open_peripheral(sfr, peripheral_name, address)

        peripheral = self._current
        assert peripheral is not None

        if address < peripheral.base_address:
            raise AddressOrderingViolation(
                [sfr],
                f"Address 0x{address:x} is below the base address of peripheral {peripheral}",
            )
        offset = address - peripheral.base_address

        edc2svd.log.info(f"  {name}")
        edc2svd.log.info(
            f"\t{name}   : {address:x}, offset = {offset:x}, reset = {reset_value:x} "
            f"({portals.value})"
        )

        layout = build_field_layout(mode, self._options)
        return add_register(peripheral, name, offset, reset_value, layout, portals)

    def _open_peripheral(self, sfr: SfrDefElement, name: str, base_address: int) -> None:
        previous_base = self._current.base_address if self._current is not None else 0
        if base_address <= previous_base:
            raise AddressOrderingViolation(
                [sfr],
                f"Base address 0x{base_address:x} of peripheral {name} does not exceed the "
                f"base address 0x{previous_base:x} of the previous peripheral",
            )

        if self._device.has_peripheral(name):
            edc2svd.log.warning(
                f"Peripheral {name} is not contiguous and appears more than once in the output"
            )

        self._current = self._device.add_peripheral(name, base_address)
        edc2svd.log.info(f"{name} base_addr = {base_address:x}")


def build_device(edc_device: EdcDeviceElement, options: Options) -> SvdDevice:
    """
    Build the output device from a parsed EDC document.

    Only SFRs in data sectors whose region identifier starts with options.region_prefix are
    converted. Peripherals and registers are added in document order.

    :param edc_device: Root element of the EDC document.
    :param options: Conversion options.

    :return: Output device.
    """
    device = SvdDevice(name=edc_device.name)

    for sector in edc_device.physical_space.data_sectors:
        if not sector.region_id.startswith(options.region_prefix):
            edc2svd.log.debug(f"Skipping data sector {sector.region_id!r}")
            continue

        # Each sector is grouped on its own; peripherals never continue across sectors.
        grouper = PeripheralGrouper(device, options)
        for sfr in sector.sfr_defs:
            grouper.add(sfr)

    return device
