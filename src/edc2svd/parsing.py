# Copyright (c) 2022 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import dataclasses as dc
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter_ns
from typing import Any, Dict, List, Mapping, Optional, Type, Union

import lxml.etree as ET
from lxml import objectify

import edc2svd

from . import bindings
from ._bindings import EdcElement, local_name
from .device import SvdDevice
from .errors import EdcParseError
from .grouping import build_device
from .writing import write_svd


@dataclass(frozen=True)
class Options:
    """Options to configure the EDC to SVD conversion."""

    # Only SFRDataSector elements with a regionid starting with this prefix are converted.
    region_prefix: str = "periph"

    # Mask OR-ed into every SFR address. The default maps the physical addresses to the KSEG1
    # segment, which is the uncached window used to access peripherals on PIC32 devices.
    address_segment_mask: int = 0xA000_0000

    # Raise an error if the fields of a register span more bits than the register size.
    # If set to False, a warning is logged and the fields are output as they are.
    strict_field_width: bool = True

    # Additional peripheral labels for SFRs that are only identified by their _modsrc attribute.
    # The value should be a dictionary mapping module source identifiers to peripheral labels,
    # for example {"DOS-01234_foo.Module": "FOO"}. Entries take precedence over the built-in table.
    module_source_peripherals: Mapping[str, str] = dc.field(default_factory=dict)


def read_edc(edc_path: Union[str, Path]) -> bindings.EdcDeviceElement:
    """
    Read an EDC file.

    :param edc_path: Path to the EDC file.

    :raises FileNotFoundError: If the EDC file does not exist.
    :raises EdcParseError: If the file is not an EDC XML document.

    :return: Root element of the document.
    """
    edc_file = Path(edc_path)

    if not edc_file.is_file():
        raise FileNotFoundError(f"No such file: {edc_file.absolute()}")

    try:
        with open(edc_file, "rb") as f:
            root = objectify.parse(f, parser=_make_parser()).getroot()
    except ET.XMLSyntaxError as e:
        raise EdcParseError(f"Error parsing EDC file {edc_file}") from e

    return _checked_root(root, str(edc_file))


def read_edc_string(text: Union[str, bytes]) -> bindings.EdcDeviceElement:
    """
    Read an EDC document from memory.

    :param text: XML content of the document.

    :raises EdcParseError: If the content is not an EDC XML document.

    :return: Root element of the document.
    """
    data = text.encode("utf-8") if isinstance(text, str) else text

    try:
        root = objectify.fromstring(data, parser=_make_parser())
    except ET.XMLSyntaxError as e:
        raise EdcParseError("Error parsing EDC document") from e

    return _checked_root(root, "XML string")


def parse(edc_path: Union[str, Path], options: Options = Options()) -> SvdDevice:
    """
    Convert a device described by an EDC file to its SVD representation.

    :param edc_path: Path to the EDC file.
    :param options: Conversion options.

    :raises FileNotFoundError: If the EDC file does not exist.
    :raises EdcError: If the file cannot be parsed or converted.

    :return: Converted device.
    """
    t_parse_start = perf_counter_ns()

    edc_device = read_edc(edc_path)
    device = build_device(edc_device, options)

    t_parse = (perf_counter_ns() - t_parse_start) / 1_000_000
    edc2svd.log.info(
        f"Converted {device.name}: {len(device.peripherals)} peripherals, "
        f"{device.register_count()} registers in {t_parse:.1f} ms"
    )

    return device


def convert(
    edc_path: Union[str, Path],
    svd_path: Union[str, Path],
    options: Options = Options(),
) -> SvdDevice:
    """
    Convert an EDC file and write the result to an SVD file.

    :param edc_path: Path to the EDC file.
    :param svd_path: Path to the SVD file to write.
    :param options: Conversion options.

    :return: Converted device.
    """
    device = parse(edc_path, options=options)
    write_svd(device, svd_path)
    return device


def _make_parser() -> ET.XMLParser:
    # Note: remove comments as otherwise these are present as nodes in the returned XML tree
    xml_parser = objectify.makeparser(remove_comments=True)
    xml_parser.set_element_class_lookup(_LocalNameLookup(bindings.BINDINGS))
    return xml_parser


def _checked_root(root: Any, source: str) -> bindings.EdcDeviceElement:
    if not isinstance(root, bindings.EdcDeviceElement):
        raise EdcParseError(
            f"{source} is not an EDC document (unexpected root element '{local_name(root)}')"
        )
    return root


class _LocalNameLookup(ET.CustomElementClassLookup):
    """
    XML element class lookup that maps an XML element to a Python class based on the local name of
    its tag, ignoring the namespace. EDC files usually qualify every element with the "edc"
    namespace, but documents without it are accepted as well.

    Elements without a binding class are handled by the regular objectify lookup.
    """

    def __init__(self, element_classes: List[Type[EdcElement]]):
        """
        :param element_classes: lxml element classes to add to the lookup table.
        """
        super().__init__(objectify.ObjectifyElementClassLookup())

        self._lookup_table: Dict[str, Type[EdcElement]] = {}
        for element_class in element_classes:
            if element_class.TAG in self._lookup_table:
                raise RuntimeError(
                    f"Multiple classes for {element_class.TAG}. "
                    "This should never happen, and likely indicates a bug in the bindings."
                )
            self._lookup_table[element_class.TAG] = element_class

    def lookup(
        self,
        node_type: str,
        _document: Any,
        _namespace: Optional[str],
        name: str,
    ) -> Optional[Type[EdcElement]]:
        """Look up the Element class for the given XML element"""
        if node_type != "element":
            return None
        return self._lookup_table.get(name)
