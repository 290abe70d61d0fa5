# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Shared fixtures for patcher tests.
"""

import logging

import pytest


@pytest.fixture
def write_file(tmp_path):
    """Create a file under tmp_path (parents included) and return its path."""

    def _write(rel_path, text):
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _info_logging(caplog):
    caplog.set_level(logging.INFO)
