# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Tests for whole-file regex patches.
"""

import re

from patcher.apply import apply_regex_patches
from patcher.descriptors import Outcome, RegexPatch
from patcher.table import REGEX_PATCHES

VERSION_SOURCE = (
    "import { createRequire } from 'module';\n"
    "const require = createRequire(import.meta.url);\n"
    "\n"
    "export const { version } = require('../package.json');\n"
)


def _version_patch(target_path, version="5.0.5"):
    return RegexPatch(
        target_path=target_path,
        match_pattern=REGEX_PATCHES[0].match_pattern,
        replacement_text=f'export const version = "{version}";',
        already_applied_marker='export const version = "',
    )


class TestFreshInstall:
    """A freshly installed file gets replaced."""

    def test_version_module_is_replaced(self, tmp_path, write_file, caplog):
        """Test the createRequire version module becomes a constant export."""
        target = write_file(
            "a.js",
            "import { createRequire } from 'module'; "
            "const require = createRequire(import.meta.url); "
            "export const { version } = require('../package.json');",
        )

        results = apply_regex_patches([_version_patch("a.js")], tmp_path)

        assert target.read_text() == 'export const version = "5.0.5";'
        assert results[0].outcome is Outcome.PATCHED
        assert "Patched a.js" in caplog.text

    def test_multiline_upstream_layout_matches(self, tmp_path, write_file):
        """Test whitespace between the upstream statements is tolerated."""
        target = write_file("lib/version.js", VERSION_SOURCE)

        results = apply_regex_patches([_version_patch("lib/version.js")], tmp_path)

        assert results[0].outcome is Outcome.PATCHED
        assert target.read_text() == 'export const version = "5.0.5";'


class TestIdempotence:
    """Running twice leaves the file as the first run wrote it."""

    def test_second_run_reports_already_patched(self, tmp_path, write_file, caplog):
        """Test the second pass detects the marker and does not rewrite."""
        target = write_file("lib/version.js", VERSION_SOURCE)
        patches = [_version_patch("lib/version.js")]

        apply_regex_patches(patches, tmp_path)
        after_first = target.read_text()
        caplog.clear()
        results = apply_regex_patches(patches, tmp_path)

        assert target.read_text() == after_first
        assert results[0].outcome is Outcome.ALREADY_PATCHED
        assert "Already patched lib/version.js" in caplog.text


class TestSkipsAndWarnings:
    """Missing and drifted files are reported, never written."""

    def test_missing_target_is_skipped(self, tmp_path, caplog):
        """Test a missing target is reported and not created."""
        results = apply_regex_patches([_version_patch("missing/version.js")], tmp_path)

        assert results[0].outcome is Outcome.SKIPPED
        assert not (tmp_path / "missing/version.js").exists()
        assert "Skipping missing/version.js (not found)" in caplog.text

    def test_unexpected_content_is_left_untouched(self, tmp_path, write_file, caplog):
        """Test drifted upstream content is warned about and kept byte-identical."""
        original = "module.exports = { version: require('./package.json').version };\n"
        target = write_file("lib/version.js", original)

        results = apply_regex_patches([_version_patch("lib/version.js")], tmp_path)

        assert target.read_text() == original
        assert results[0].outcome is Outcome.UNEXPECTED
        assert "Warning: lib/version.js has unexpected content" in caplog.text
        assert any(r.levelname == "WARNING" for r in caplog.records)

    def test_check_only_does_not_write(self, tmp_path, write_file):
        """Test check mode reports a pending patch without writing."""
        target = write_file("lib/version.js", VERSION_SOURCE)

        results = apply_regex_patches(
            [_version_patch("lib/version.js")], tmp_path, check_only=True
        )

        assert results[0].outcome is Outcome.NEEDS_PATCH
        assert target.read_text() == VERSION_SOURCE


class TestIndependence:
    """Descriptor order does not affect any file's final state."""

    def test_reordering_gives_same_files(self, tmp_path):
        """Test applying the table forwards and backwards yields identical trees."""
        patches = [
            _version_patch("pkg-a/version.js", "1.0.0"),
            _version_patch("pkg-b/version.js", "2.0.0"),
            RegexPatch(
                target_path="pkg-c/index.js",
                match_pattern=re.compile(r"old"),
                replacement_text="new",
                already_applied_marker="new",
            ),
        ]
        trees = []
        for name, ordered in (("fwd", patches), ("rev", list(reversed(patches)))):
            root = tmp_path / name
            for rel, text in (
                ("pkg-a/version.js", VERSION_SOURCE),
                ("pkg-b/version.js", VERSION_SOURCE),
                ("pkg-c/index.js", "old"),
            ):
                (root / rel).parent.mkdir(parents=True)
                (root / rel).write_text(text)
            apply_regex_patches(ordered, root)
            trees.append(
                {p.relative_to(root).as_posix(): p.read_text() for p in root.rglob("*.js")}
            )

        assert trees[0] == trees[1]
        assert trees[0]["pkg-a/version.js"] == 'export const version = "1.0.0";'
        assert trees[0]["pkg-c/index.js"] == "new"
