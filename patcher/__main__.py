# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
from .apply import main

raise SystemExit(main())
