# Copyright (c) 2023 Nordic Semiconductor ASA
# SPDX-License-Identifier: Apache-2.0

import logging

import pytest

import edc2svd


@pytest.fixture(autouse=True)
def restore_log_level():
    """The command line changes the level of the package logger; undo it after each test."""
    level = edc2svd.log.level
    yield
    edc2svd.log.setLevel(level)


@pytest.fixture
def warnings_log(caplog):
    caplog.set_level(logging.WARNING, logger="edc2svd")
    return caplog
