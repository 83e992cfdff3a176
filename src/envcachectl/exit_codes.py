from __future__ import annotations

OK = 0
DIFF_FOUND = 1
ERR_USAGE = 2
ERR_CONFIG = 3
ERR_PREREQ = 4
ERR_ARTIFACT = 5
ERR_VALIDATION = 6
ERR_INTERNAL = 99
