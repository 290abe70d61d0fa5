# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Static descriptor tables for the dependencies that need patching.

Paths are relative to the patch root (see config.PATCH_ROOT).
"""

import re
from typing import List

from .descriptors import JsonInlinePatch, MdnDataFile, MdnDataPatch, RegexPatch

# csso and css-tree read their version from package.json at runtime
_VERSION_REQUIRE = re.compile(
    r"import \{ createRequire \} from 'module';\s*"
    r"const require = createRequire\(import\.meta\.url\);\s*"
    r"export const \{ version \} = require\('\.\./package\.json'\);"
)

_VERSION_MARKER = 'export const version = "'

REGEX_PATCHES: List[RegexPatch] = [
    RegexPatch(
        target_path="node_modules/csso/lib/version.js",
        match_pattern=_VERSION_REQUIRE,
        replacement_text='export const version = "5.0.5";',
        already_applied_marker=_VERSION_MARKER,
    ),
    RegexPatch(
        target_path="node_modules/css-tree/lib/version.js",
        match_pattern=_VERSION_REQUIRE,
        replacement_text='export const version = "2.2.1";',
        already_applied_marker=_VERSION_MARKER,
    ),
]

JSON_INLINE_PATCHES: List[JsonInlinePatch] = [
    JsonInlinePatch(
        target_path="node_modules/css-tree/lib/data-patch.js",
        source_json_path="node_modules/css-tree/data/patch.json",
    ),
]

MDN_DATA_PATCHES: List[MdnDataPatch] = [
    MdnDataPatch(
        target_directory="node_modules/css-tree/lib",
        files=(
            MdnDataFile("node_modules/mdn-data/css/at-rules.json", "mdn-at-rules.json"),
            MdnDataFile("node_modules/mdn-data/css/properties.json", "mdn-properties.json"),
            MdnDataFile("node_modules/mdn-data/css/syntaxes.json", "mdn-syntaxes.json"),
        ),
        patch_file_path="node_modules/css-tree/lib/data.js",
    ),
]
