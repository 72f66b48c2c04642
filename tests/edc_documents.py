# Copyright (c) 2023 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

"""
Builders for small EDC documents used in the tests.
"""

from typing import Optional

import edc2svd

EDC_NAMESPACE = "http://crownking/edc"

# 32 bit reset pattern with all bits cleared.
ZERO_RESET = "0" * 32


def field(name: str, width: object, cname: Optional[str] = None) -> str:
    return (
        f'<edc:SFRFieldDef edc:cname="{cname or name}" edc:name="{name}" '
        f'edc:nzwidth="{width}"/>'
    )


def adjust(offset: object) -> str:
    return f'<edc:AdjustPoint edc:offset="{offset}"/>'


def sfr(
    name: str,
    address: str,
    *entries: str,
    mclr: str = ZERO_RESET,
    cname: Optional[str] = None,
    **attrs: str,
) -> str:
    attrs_str = "".join(f' edc:{k}="{v}"' for k, v in attrs.items())
    return (
        f'<edc:SFRDef edc:_addr="{address}" edc:cname="{cname or name}" edc:name="{name}" '
        f'edc:mclr="{mclr}"{attrs_str}>'
        "<edc:SFRModeList>"
        f'<edc:SFRMode edc:id="DS.0">{"".join(entries)}</edc:SFRMode>'
        '<edc:SFRMode edc:id="LT.0"/>'
        "</edc:SFRModeList>"
        "</edc:SFRDef>"
    )


def sector(*children: str, regionid: Optional[str] = "periph") -> str:
    region_str = f' edc:regionid="{regionid}"' if regionid is not None else ""
    return f"<edc:SFRDataSector{region_str}>{''.join(children)}</edc:SFRDataSector>"


def document(*sectors: str, name: str = "32MXTEST") -> str:
    return (
        f'<edc:PIC xmlns:edc="{EDC_NAMESPACE}" edc:name="{name}" edc:arch="32xxxx">'
        "<!-- physical address space -->"
        f"<edc:PhysicalSpace>{''.join(sectors)}</edc:PhysicalSpace>"
        "</edc:PIC>"
    )


def first_sfr(xml: str) -> edc2svd.SfrDefElement:
    """Parse a document and return its first SFR definition."""
    edc_device = edc2svd.read_edc_string(xml)
    return next(next(edc_device.physical_space.data_sectors).sfr_defs)


def sfr_element(sfr_xml: str) -> edc2svd.SfrDefElement:
    """Parse a single SFR definition wrapped in a minimal document."""
    return first_sfr(document(sector(sfr_xml)))
