# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
Configuration module for the dependency patcher.

All settings are read from the environment once, at import time.
"""

import os

# ============================================================================
# Paths
# ============================================================================

PATCH_ROOT = os.getenv("PATCH_ROOT", ".")
"""
Directory that contains the installed `node_modules` tree.
Descriptor paths are resolved relative to it.
Default: the current working directory (where the package manager runs hooks).
"""

# ============================================================================
# Logging
# ============================================================================

PATCH_LOG_LEVEL = os.getenv("PATCH_LOG_LEVEL", "INFO").upper()
"""
Log level for status output.
Options: 'DEBUG', 'INFO', 'WARNING', 'ERROR'
- 'INFO': one line per descriptor (default)
- 'WARNING': only unexpected content and missing data sources
"""

PATCH_LOG_FORMAT = os.getenv("PATCH_LOG_FORMAT", "%(message)s")
"""
Format string passed to logging.basicConfig.
The default prints bare status lines, e.g. "Patched node_modules/csso/lib/version.js".
"""
