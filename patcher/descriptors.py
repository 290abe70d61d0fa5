# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Patch descriptor records and result types.
"""

import enum
import re
from dataclasses import dataclass
from typing import Tuple


class Outcome(enum.Enum):
    """What happened to a single descriptor during a run."""

    PATCHED = "patched"
    ALREADY_PATCHED = "already_patched"
    SKIPPED = "skipped"
    UNEXPECTED = "unexpected"
    # Only produced with check_only=True
    NEEDS_PATCH = "needs_patch"


@dataclass(frozen=True)
class PatchResult:
    path: str
    outcome: Outcome


@dataclass(frozen=True)
class RegexPatch:
    """
    Replace a whole file when its content matches a known upstream snippet.

    Attributes:
        target_path: File to patch, relative to the patch root
        match_pattern: Pattern searched for in the current file text
        replacement_text: New content for the entire file
        already_applied_marker: Substring present once the patch was applied
    """

    target_path: str
    match_pattern: "re.Pattern[str]"
    replacement_text: str
    already_applied_marker: str


@dataclass(frozen=True)
class JsonInlinePatch:
    """
    Turn a module that requires a JSON file into one exporting the JSON inline.

    Attributes:
        target_path: Module to rewrite, relative to the patch root
        source_json_path: JSON document to embed, relative to the patch root
    """

    target_path: str
    source_json_path: str


@dataclass(frozen=True)
class MdnDataFile:
    source_path: str
    dest_file_name: str

    @property
    def require_specifier(self) -> str:
        """Bare specifier the upstream module passes to require()."""
        marker = "node_modules/"
        idx = self.source_path.rfind(marker)
        if idx == -1:
            return self.source_path
        return self.source_path[idx + len(marker):]


@dataclass(frozen=True)
class MdnDataPatch:
    """
    Copy mdn-data JSON files next to a module and import them statically.

    Attributes:
        target_directory: Directory receiving the copied JSON files
        files: Source files and the names they get in target_directory
        patch_file_path: Module whose require() calls are rewritten to imports
    """

    target_directory: str
    files: Tuple[MdnDataFile, ...]
    patch_file_path: str
