# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Post-install patches for node_modules that load JSON through require().
"""

from .apply import (
    apply_all,
    apply_json_inline_patches,
    apply_mdn_data_patches,
    apply_regex_patches,
    main,
)
from .descriptors import (
    JsonInlinePatch,
    MdnDataFile,
    MdnDataPatch,
    Outcome,
    PatchResult,
    RegexPatch,
)

__all__ = [
    "apply_all",
    "apply_json_inline_patches",
    "apply_mdn_data_patches",
    "apply_regex_patches",
    "main",
    "JsonInlinePatch",
    "MdnDataFile",
    "MdnDataPatch",
    "Outcome",
    "PatchResult",
    "RegexPatch",
]
