# Copyright (c) 2024 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from textwrap import dedent
from typing import Optional, Sequence

import edc2svd


def cli(argv: Optional[Sequence[str]] = None) -> None:
    top = argparse.ArgumentParser(
        prog="edc2svd",
        description=dedent(
            """\
            Convert an MCU register description from the EDC format to the System View
            Description (SVD) format.
            """
        ),
        allow_abbrev=False,
    )
    top.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help=(
            "Output verbose logs. Can be given multiple times to increase the verbosity. "
            "By default only errors are output."
        ),
    )
    top.add_argument(
        "--options",
        type=json.loads,
        help=(
            "JSON object used to override fields in the Options object to customize the "
            "conversion. Mainly intended for advanced use cases such as working around "
            "difficult EDC files."
        ),
    )
    top.add_argument(
        "edc_file",
        metavar="input.edc",
        type=Path,
        help="Path to the EDC file to convert.",
    )
    top.add_argument(
        "svd_file",
        metavar="output.svd",
        type=Path,
        help="Path to the SVD file to write.",
    )

    args = top.parse_args(argv)

    log_level = {
        0: logging.ERROR,
        1: logging.INFO,
    }.get(args.verbose, logging.DEBUG)
    edc2svd.log.setLevel(log_level)

    options = edc2svd.Options()
    if args.options:
        options = dataclasses.replace(options, **args.options)

    try:
        edc2svd.convert(args.edc_file, args.svd_file, options=options)
    except (edc2svd.EdcError, FileNotFoundError) as e:
        edc2svd.log.critical(f"edc2svd: {e}")
        sys.exit(1)

    sys.exit(0)


# Entry point when running with python -m edc2svd
if __name__ == "__main__":
    cli()
