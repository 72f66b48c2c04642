# Copyright (c) 2023 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

"""
Serialization of the output device to the SVD XML format.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import lxml.etree as ET

from .device import SvdDevice, SvdField, SvdPeripheral, SvdRegister


def _add_text(parent: ET._Element, tag: str, text: str) -> ET._Element:
    elem = ET.SubElement(parent, tag)
    elem.text = text
    return elem


def _hex(value: int) -> str:
    return f"0x{value:x}"


def _field_element(parent: ET._Element, field: SvdField) -> None:
    field_e = ET.SubElement(parent, "field")
    _add_text(field_e, "name", field.name)
    _add_text(field_e, "bitRange", field.bit_range)


def _register_element(parent: ET._Element, register: SvdRegister) -> None:
    reg_e = ET.SubElement(parent, "register")
    _add_text(reg_e, "name", register.name)
    _add_text(reg_e, "description", register.description)
    _add_text(reg_e, "addressOffset", _hex(register.offset))
    _add_text(reg_e, "size", str(register.size))
    _add_text(reg_e, "resetValue", str(register.reset_value))

    if register.fields is not None:
        fields_e = ET.SubElement(reg_e, "fields")
        for field in register.fields:
            _field_element(fields_e, field)


def _peripheral_element(parent: ET._Element, peripheral: SvdPeripheral) -> None:
    periph_e = ET.SubElement(parent, "peripheral")
    _add_text(periph_e, "name", peripheral.name)
    _add_text(periph_e, "description", peripheral.description)
    _add_text(periph_e, "baseAddress", _hex(peripheral.base_address))

    registers_e = ET.SubElement(periph_e, "registers")
    for register in peripheral.registers:
        _register_element(registers_e, register)


def to_element(device: SvdDevice) -> ET._Element:
    """
    Build the SVD XML tree of a device.

    :param device: Device to serialize.

    :return: Root "device" element.
    """
    device_e = ET.Element("device")
    _add_text(device_e, "name", device.name)

    peripherals_e = ET.SubElement(device_e, "peripherals")
    for peripheral in device.peripherals:
        _peripheral_element(peripherals_e, peripheral)

    return device_e


def to_string(device: SvdDevice) -> str:
    """Serialize a device to an indented SVD XML string, without an XML declaration."""
    return ET.tostring(to_element(device), encoding="unicode", pretty_print=True)


def write_svd(device: SvdDevice, svd_path: Union[str, Path]) -> None:
    """
    Write a device to an indented SVD file.

    :param device: Device to serialize.
    :param svd_path: Path of the output file. Overwritten if it exists.
    """
    tree = ET.ElementTree(to_element(device))
    with open(svd_path, "wb") as f:
        tree.write(f, encoding="UTF-8", xml_declaration=True, pretty_print=True)
