# Copyright (c) 2022 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

from ._bindings import (
    decode_reset_pattern,
    parse_address_literal,
)
from .bindings import (
    Portals,
    decode_portals,
    EdcDeviceElement,
    PhysicalSpaceElement,
    SfrDataSectorElement,
    SfrDefElement,
    SfrModeElement,
    SfrFieldDefElement,
    AdjustPointElement,
)
from .errors import (
    EdcError,
    EdcParseError,
    EdcValueError,
    EdcDefinitionError,
    EdcStructureError,
    MalformedNumber,
    UnrecognizedPortalsSpec,
    UnexpectedFieldEntry,
    NameMismatch,
    MissingPeripheralHint,
    AddressOrderingViolation,
    FieldOverflow,
    MissingElement,
    MissingAttribute,
)
from .device import (
    SvdDevice,
    SvdPeripheral,
    SvdRegister,
    SvdField,
)
from .layout import FieldLayout, build_field_layout
from .registers import add_register
from .grouping import (
    MODULE_SOURCE_PERIPHERALS,
    PeripheralGrouper,
    build_device,
    infer_peripheral_name,
)
from .parsing import (
    Options,
    convert,
    parse,
    read_edc,
    read_edc_string,
)
from .writing import to_element, to_string, write_svd

import importlib.metadata
import logging
import sys

__version__ = importlib.metadata.version("edc2svd")


def _init_logger() -> logging.Logger:
    formatter = logging.Formatter("{message}", style="{")
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logger = logging.getLogger("edc2svd")
    logger.setLevel(logging.ERROR)
    logger.addHandler(handler)

    return logger


# logging.Logger instance used for log output from edc2svd
log = _init_logger()

__all__ = [
    # from _bindings
    "decode_reset_pattern",
    "parse_address_literal",
    # from bindings
    "Portals",
    "decode_portals",
    "EdcDeviceElement",
    "PhysicalSpaceElement",
    "SfrDataSectorElement",
    "SfrDefElement",
    "SfrModeElement",
    "SfrFieldDefElement",
    "AdjustPointElement",
    # from errors
    "EdcError",
    "EdcParseError",
    "EdcValueError",
    "EdcDefinitionError",
    "EdcStructureError",
    "MalformedNumber",
    "UnrecognizedPortalsSpec",
    "UnexpectedFieldEntry",
    "NameMismatch",
    "MissingPeripheralHint",
    "AddressOrderingViolation",
    "FieldOverflow",
    "MissingElement",
    "MissingAttribute",
    # from device
    "SvdDevice",
    "SvdPeripheral",
    "SvdRegister",
    "SvdField",
    # from layout
    "FieldLayout",
    "build_field_layout",
    # from registers
    "add_register",
    # from grouping
    "MODULE_SOURCE_PERIPHERALS",
    "PeripheralGrouper",
    "build_device",
    "infer_peripheral_name",
    # from parsing
    "Options",
    "convert",
    "parse",
    "read_edc",
    "read_edc_string",
    # from writing
    "to_element",
    "to_string",
    "write_svd",
    # other
    "log",
    "__version__",
]
