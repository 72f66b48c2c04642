# Copyright (c) 2023 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

import pytest

import edc2svd
from edc2svd import Options, PeripheralGrouper, SvdDevice, build_device, infer_peripheral_name

from edc_documents import adjust, document, field, sector, sfr, sfr_element

# Disable the KSEG1 mapping so that addresses in the tests are used as they are.
UNMAPPED = Options(address_segment_mask=0)


def convert(xml, options=UNMAPPED):
    return build_device(edc2svd.read_edc_string(xml), options)


def layout_of(device):
    return [
        (p.name, p.base_address, [(r.name, r.offset) for r in p.registers])
        for p in device.peripherals
    ]


class TestInferPeripheralName:
    def test_base_of_peripheral_first(self):
        element = sfr_element(
            sfr("A", "0x0", baseofperipheral="UART1", memberofperipheral="UART2", grp="UART3")
        )
        assert infer_peripheral_name(element) == "UART1"

    def test_member_of_peripheral(self):
        element = sfr_element(sfr("A", "0x0", memberofperipheral="UART2", grp="UART3"))
        assert infer_peripheral_name(element) == "UART2"

    def test_empty_member_of_peripheral_is_ignored(self):
        element = sfr_element(sfr("A", "0x0", memberofperipheral="", grp="RCON"))
        assert infer_peripheral_name(element) == "RCON"

    @pytest.mark.parametrize(
        "module_source, expected",
        [
            ("DOS-01618_RPINRx.Module", "PPS"),
            ("DOS-01618_RPORx.Module", "PPS"),
            ("DOS-01423_RPINRx.Module", "PPS"),
            ("DOS-01423_RPORx.Module", "PPS"),
            ("DOS-01475_lpwr_deep_sleep_ctrl_v2.Module", "DSCTRL"),
        ],
    )
    def test_module_source(self, module_source, expected):
        element = sfr_element(sfr("RPA0R", "0x0", _modsrc=module_source))
        assert infer_peripheral_name(element) == expected

    def test_unknown_module_source(self):
        element = sfr_element(sfr("A", "0x0", _modsrc="DOS-99999_unknown.Module"))
        with pytest.raises(edc2svd.MissingPeripheralHint):
            infer_peripheral_name(element)

    def test_custom_module_source_table(self):
        element = sfr_element(sfr("A", "0x0", _modsrc="DOS-99999_unknown.Module"))
        table = {"DOS-99999_unknown.Module": "FOO"}
        assert infer_peripheral_name(element, table) == "FOO"

    def test_no_hint(self):
        element = sfr_element(sfr("A", "0x0"))
        with pytest.raises(edc2svd.MissingPeripheralHint, match="Missing peripheral for A"):
            infer_peripheral_name(element)

    def test_only_first_word_is_used(self):
        element = sfr_element(sfr("A", "0x0", grp="ADC1 Analog to digital converter"))
        assert infer_peripheral_name(element) == "ADC1"

    def test_leading_whitespace_in_hint(self):
        element = sfr_element(sfr("A", "0x0", grp=" UART1"))
        assert infer_peripheral_name(element) == "UART1"

    @pytest.mark.parametrize("hints", [{"baseofperipheral": ""}, {"grp": "   "}])
    def test_empty_hint(self, hints):
        element = sfr_element(sfr("A", "0x0", **hints))
        with pytest.raises(edc2svd.MissingPeripheralHint):
            infer_peripheral_name(element)


def test_registers_grouped_by_label():
    device = convert(
        document(
            sector(
                sfr("A", "0x1000", grp="P1"),
                sfr("B", "0x1004", grp="P1"),
                sfr("C", "0x1010", grp="P2"),
            )
        )
    )

    assert layout_of(device) == [
        ("P1", 0x1000, [("A", 0x0), ("B", 0x4)]),
        ("P2", 0x1010, [("C", 0x0)]),
    ]


def test_addresses_mapped_to_segment():
    device = convert(
        document(
            sector(
                sfr("WDTCON", "0x1f800000", baseofperipheral="WDT", portals="CLR SET INV"),
                sfr("RSWRST", "0x1f80f610", memberofperipheral="RCON"),
            )
        ),
        Options(),
    )

    assert layout_of(device) == [
        (
            "WDT",
            0xBF80_0000,
            [("WDTCON", 0x0), ("WDTCONCLR", 0x4), ("WDTCONSET", 0x8), ("WDTCONINV", 0xC)],
        ),
        ("RCON", 0xBF80_F610, [("RSWRST", 0x0)]),
    ]


def test_base_address_must_increase():
    xml = document(
        sector(
            sfr("A", "0x2000", grp="P1"),
            sfr("B", "0x1000", grp="P2"),
        )
    )

    with pytest.raises(edc2svd.AddressOrderingViolation):
        convert(xml)


def test_equal_base_address_is_rejected():
    xml = document(
        sector(
            sfr("A", "0x2000", grp="P1"),
            sfr("B", "0x2000", grp="P2"),
        )
    )

    with pytest.raises(edc2svd.AddressOrderingViolation):
        convert(xml)


def test_register_below_peripheral_base():
    xml = document(
        sector(
            sfr("A", "0x2000", grp="P1"),
            sfr("B", "0x1ffc", grp="P1"),
        )
    )

    with pytest.raises(edc2svd.AddressOrderingViolation):
        convert(xml)


def test_first_peripheral_at_address_zero():
    with pytest.raises(edc2svd.AddressOrderingViolation):
        convert(document(sector(sfr("A", "0x0", grp="P1"))))


def test_name_mismatch():
    xml = document(sector(sfr("OSCCON", "0x1000", cname="OSCCON2", grp="OSC")))

    with pytest.raises(edc2svd.NameMismatch, match="OSCCON2"):
        convert(xml)


def test_only_peripheral_sectors_are_converted():
    device = convert(
        document(
            sector(sfr("CFG", "0x100", grp="CFG"), regionid="sfrs"),
            sector(sfr("A", "0x1000", grp="P1")),
            sector(sfr("NOREGION", "0x1800", grp="NR"), regionid=None),
            sector(sfr("B", "0x2000", grp="P2"), regionid="periph2"),
        )
    )

    assert [p.name for p in device.peripherals] == ["P1", "P2"]


def test_other_sector_children_are_skipped():
    device = convert(
        document(
            sector(
                sfr("A", "0x1000", grp="P1"),
                adjust(32),
                '<edc:JoinedSFRDef edc:_addr="0x1004" edc:name="AB"/>',
                sfr("B", "0x1008", grp="P1"),
            )
        )
    )

    assert layout_of(device) == [("P1", 0x1000, [("A", 0x0), ("B", 0x8)])]


def test_peripherals_do_not_span_sectors(warnings_log):
    device = convert(
        document(
            sector(sfr("A", "0x1000", grp="P1")),
            sector(sfr("B", "0x1004", grp="P1"), sfr("C", "0x1100", grp="P2")),
        )
    )

    assert layout_of(device) == [
        ("P1", 0x1000, [("A", 0x0)]),
        ("P1", 0x1004, [("B", 0x0)]),
        ("P2", 0x1100, [("C", 0x0)]),
    ]
    assert "P1 is not contiguous" in warnings_log.text


def test_sector_below_previous_sector():
    device = convert(
        document(
            sector(sfr("A", "0x2000", grp="P1")),
            sector(sfr("B", "0x1000", grp="P2"), regionid="periph2"),
        )
    )

    assert layout_of(device) == [
        ("P1", 0x2000, [("A", 0x0)]),
        ("P2", 0x1000, [("B", 0x0)]),
    ]


def test_reopened_peripheral(warnings_log):
    device = convert(
        document(
            sector(
                sfr("A", "0x1000", grp="P1"),
                sfr("B", "0x1100", grp="P2"),
                sfr("C", "0x1200", grp="P1"),
            )
        )
    )

    assert [p.name for p in device.peripherals] == ["P1", "P2", "P1"]
    assert "P1 is not contiguous" in warnings_log.text


def test_missing_mode_list():
    xml = document(
        sector(
            '<edc:SFRDef edc:_addr="0x1000" edc:name="A" edc:cname="A" edc:mclr="0" '
            'edc:grp="P1"/>'
        )
    )

    with pytest.raises(edc2svd.MissingElement, match="SFRModeList"):
        convert(xml)


def test_missing_physical_space():
    edc_device = edc2svd.read_edc_string(
        '<edc:PIC xmlns:edc="http://crownking/edc" edc:name="X"/>'
    )

    with pytest.raises(edc2svd.MissingElement, match="PhysicalSpace"):
        build_device(edc_device, UNMAPPED)


def test_grouper_tracks_open_peripheral():
    device = SvdDevice(name="X")
    grouper = PeripheralGrouper(device, UNMAPPED)
    assert grouper.current_peripheral is None

    registers = grouper.add(
        sfr_element(sfr("A", "0x1000", field("F", 4), grp="P1", portals="CLR - -"))
    )

    assert [r.name for r in registers] == ["A", "ACLR"]
    assert grouper.current_peripheral is device.peripherals[0]
    assert grouper.current_peripheral.name == "P1"
    assert registers[0].fields[0].bit_range == "[3:0]"


def test_module_source_option():
    options = Options(
        address_segment_mask=0,
        module_source_peripherals={"DOS-99999_unknown.Module": "FOO"},
    )
    device = convert(
        document(sector(sfr("A", "0x1000", _modsrc="DOS-99999_unknown.Module"))), options
    )

    assert [p.name for p in device.peripherals] == ["FOO"]
