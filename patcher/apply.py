# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""Patch installed node_modules that load JSON through require().

Ahead-of-time bundlers cannot follow `createRequire(import.meta.url)` calls,
so the affected dependency files are rewritten in place after install.

Usage:
    python -m patcher          # apply all patches
    python -m patcher --check  # report what still needs patching, write nothing

Every patch is idempotent: running again after a successful pass only reports
"Already patched".
"""
from __future__ import annotations

import logging
import posixpath
import re
import shutil
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from . import config
from .descriptors import (
    JsonInlinePatch,
    MdnDataFile,
    MdnDataPatch,
    Outcome,
    PatchResult,
    RegexPatch,
)
from .table import JSON_INLINE_PATCHES, MDN_DATA_PATCHES, REGEX_PATCHES

logger = logging.getLogger(__name__)

JSON_INLINE_PREFIX = "const patch = "
JSON_INLINE_SUFFIX = "export default patch;"

_CREATE_REQUIRE_IMPORT = re.compile(
    r"^import \{ createRequire \} from ['\"](?:node:)?module['\"];?[ \t]*(?:\r?\n)?", re.MULTILINE
)
_CREATE_REQUIRE_CALL = re.compile(
    r"^const require = createRequire\(import\.meta\.url\);?[ \t]*(?:\r?\n)?", re.MULTILINE
)
_REQUIRE_CALL = re.compile(r"\brequire\(")


def _read_text(path: Path) -> Optional[str]:
    """Read *path* keeping its line endings; None when it is not valid UTF-8."""
    try:
        with open(path, encoding="utf-8", newline="") as fh:
            return fh.read()
    except UnicodeDecodeError as e:
        logger.debug(f"Cannot decode {path}: {e}")
        return None


def _write_text(path: Path, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(text)


def _not_found(rel_path: str) -> PatchResult:
    logger.info(f"Skipping {rel_path} (not found)")
    return PatchResult(rel_path, Outcome.SKIPPED)


def _needs_patch(rel_path: str) -> PatchResult:
    logger.info(f"Needs patch {rel_path}")
    return PatchResult(rel_path, Outcome.NEEDS_PATCH)


def _unexpected(rel_path: str) -> PatchResult:
    logger.warning(f"Warning: {rel_path} has unexpected content")
    return PatchResult(rel_path, Outcome.UNEXPECTED)


# ============================================================================
# Regex patches
# ============================================================================

def apply_regex_patches(
    patches: Iterable[RegexPatch], root: Path, *, check_only: bool = False
) -> List[PatchResult]:
    """
    Replace whole files whose content matches a known upstream snippet.

    Args:
        patches: Descriptors, applied in order
        root: Directory the descriptor paths are relative to
        check_only: Report pending patches instead of writing them

    Returns:
        One PatchResult per descriptor, in input order
    """
    results: List[PatchResult] = []
    for patch in patches:
        target = root / patch.target_path
        if not target.exists():
            results.append(_not_found(patch.target_path))
            continue

        content = _read_text(target)
        if content is None:
            results.append(_unexpected(patch.target_path))
        elif patch.match_pattern.search(content):
            if check_only:
                results.append(_needs_patch(patch.target_path))
                continue
            _write_text(target, patch.replacement_text)
            logger.info(f"Patched {patch.target_path}")
            results.append(PatchResult(patch.target_path, Outcome.PATCHED))
        elif patch.already_applied_marker in content:
            logger.info(f"Already patched {patch.target_path}")
            results.append(PatchResult(patch.target_path, Outcome.ALREADY_PATCHED))
        else:
            results.append(_unexpected(patch.target_path))
    return results


# ============================================================================
# JSON inline patches
# ============================================================================

def render_json_inline(json_text: str) -> str:
    """Module source that default-exports *json_text* as a literal."""
    return f"{JSON_INLINE_PREFIX}{json_text};\n{JSON_INLINE_SUFFIX}"


def is_json_inlined(content: str) -> bool:
    """Whether *content* has the shape render_json_inline() produces."""
    if not content.startswith(JSON_INLINE_PREFIX):
        return False
    if content[len(JSON_INLINE_PREFIX):].lstrip().startswith("require("):
        return False
    return content.rstrip().endswith(JSON_INLINE_SUFFIX)


def apply_json_inline_patches(
    patches: Iterable[JsonInlinePatch], root: Path, *, check_only: bool = False
) -> List[PatchResult]:
    """Embed required JSON documents directly into the modules that load them."""
    results: List[PatchResult] = []
    for patch in patches:
        target = root / patch.target_path
        source = root / patch.source_json_path
        if not target.exists() or not source.exists():
            results.append(_not_found(patch.target_path))
            continue

        content = _read_text(target)
        if content is None:
            results.append(_unexpected(patch.target_path))
            continue
        if is_json_inlined(content):
            logger.info(f"Already patched {patch.target_path}")
            results.append(PatchResult(patch.target_path, Outcome.ALREADY_PATCHED))
            continue

        if check_only:
            results.append(_needs_patch(patch.target_path))
            continue

        json_text = _read_text(source)
        if json_text is None:
            logger.warning(f"Warning: {patch.source_json_path} has unexpected content")
            results.append(PatchResult(patch.target_path, Outcome.UNEXPECTED))
            continue
        _write_text(target, render_json_inline(json_text))
        logger.info(f"Patched {patch.target_path} (inlined JSON)")
        results.append(PatchResult(patch.target_path, Outcome.PATCHED))
    return results


# ============================================================================
# mdn-data patches
# ============================================================================

def local_import_path(patch: MdnDataPatch, data_file: MdnDataFile) -> str:
    """Import specifier of a copied data file, relative to the patched module."""
    dest = posixpath.join(patch.target_directory, data_file.dest_file_name)
    rel = posixpath.relpath(dest, posixpath.dirname(patch.patch_file_path))
    if not rel.startswith("../"):
        rel = "./" + rel
    return rel


def rewrite_mdn_imports(content: str, patch: MdnDataPatch) -> Optional[str]:
    """
    Swap the require() calls for the mdn-data datasets with JSON imports.

    The createRequire preamble is dropped once nothing else in the module
    calls require(). Returns None when none of the dataset require() calls
    is present.
    """
    eol = "\r\n" if "\r\n" in content else "\n"
    imports: List[str] = []
    for data_file in patch.files:
        call = re.compile(
            r"^(?:const|let|var) (\w+) = require\((['\"])"
            + re.escape(data_file.require_specifier)
            + r"\2\);?[ \t]*(?:\r?\n)?",
            re.MULTILINE,
        )
        match = call.search(content)
        if match is None:
            continue
        path = local_import_path(patch, data_file)
        imports.append(f"import {match.group(1)} from '{path}' with {{ type: 'json' }};{eol}")
        content = content[: match.start()] + content[match.end():]

    if not imports:
        return None

    block = "".join(imports)
    drop_preamble = _REQUIRE_CALL.search(content) is None
    if drop_preamble:
        content = _CREATE_REQUIRE_CALL.sub("", content, count=1)

    preamble = _CREATE_REQUIRE_IMPORT.search(content)
    if preamble is None:
        return block + content
    end = preamble.end() if drop_preamble else preamble.start()
    return content[: preamble.start()] + block + content[end:]


def apply_mdn_data_patches(
    patches: Iterable[MdnDataPatch], root: Path, *, check_only: bool = False
) -> List[PatchResult]:
    """
    Copy mdn-data JSON files into a dependency and import them statically.

    A module that already imports any of the copied files counts as patched;
    the copies are not refreshed in that case.
    """
    results: List[PatchResult] = []
    for patch in patches:
        target = root / patch.patch_file_path
        if not target.exists():
            results.append(_not_found(patch.patch_file_path))
            continue

        content = _read_text(target)
        if content is None:
            results.append(_unexpected(patch.patch_file_path))
            continue
        if any(local_import_path(patch, f) in content for f in patch.files):
            logger.info(f"Already patched {patch.patch_file_path} (mdn-data JSON imports)")
            results.append(PatchResult(patch.patch_file_path, Outcome.ALREADY_PATCHED))
            continue

        new_content = rewrite_mdn_imports(content, patch)
        if new_content is None:
            results.append(_unexpected(patch.patch_file_path))
            continue

        if check_only:
            results.append(_needs_patch(patch.patch_file_path))
            continue

        dest_dir = root / patch.target_directory
        dest_dir.mkdir(parents=True, exist_ok=True)
        for data_file in patch.files:
            source = root / data_file.source_path
            if not source.exists():
                logger.warning(f"Warning: {data_file.source_path} not found")
                continue
            shutil.copyfile(source, dest_dir / data_file.dest_file_name)
            logger.debug(f"Copied {data_file.source_path} -> {dest_dir / data_file.dest_file_name}")

        _write_text(target, new_content)
        logger.info(f"Patched {patch.patch_file_path} (mdn-data JSON imports)")
        results.append(PatchResult(patch.patch_file_path, Outcome.PATCHED))
    return results


# ============================================================================
# Entry point
# ============================================================================

def apply_all(root: Path, *, check_only: bool = False) -> List[PatchResult]:
    """Run every descriptor table against *root*, regex patches first."""
    results = apply_regex_patches(REGEX_PATCHES, root, check_only=check_only)
    results += apply_json_inline_patches(JSON_INLINE_PATCHES, root, check_only=check_only)
    results += apply_mdn_data_patches(MDN_DATA_PATCHES, root, check_only=check_only)
    return results


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    check_only = "--check" in args

    logging.basicConfig(level=config.PATCH_LOG_LEVEL, format=config.PATCH_LOG_FORMAT)

    root = Path(config.PATCH_ROOT)
    try:
        results = apply_all(root, check_only=check_only)
    except OSError as e:
        logger.error(f"Fatal I/O error while patching {root.resolve()}: {e}")
        return 1

    if check_only and any(r.outcome is Outcome.NEEDS_PATCH for r in results):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
