from __future__ import annotations

import os
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv  # type: ignore

load_dotenv()


def _csv(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    return tuple(p.strip() for p in raw.split(",") if p.strip())


# Namespace the checks are limited to (ICU is carved out)
INCLUDE_PREFIXES = _csv("API_LINT_INCLUDE_PREFIXES", ("android.",))
EXCLUDE_PREFIXES = _csv("API_LINT_EXCLUDE_PREFIXES", ("android.icu.",))

# Written relative to the working directory at end of run
REPORT_FILE = Path(os.getenv("API_LINT_REPORT_FILE", "permissions.json"))

DOC_CACHE_SIZE = int(os.getenv("API_LINT_DOC_CACHE_SIZE", "1"))

VERBOSE = os.getenv("API_LINT_VERBOSE", "").strip().lower() in ("1", "true", "yes", "on")

PERMISSION_ANNOTATION = "RequiresPermission"
PERMISSION_ATTRIBUTES = ("value", "allOf", "anyOf")
PERMISSION_PREFIX = "android.permission."

# legacy support-library name, the androidx name, and the platform's own copy
INT_DEF_ANNOTATIONS = (
    "android.support.annotation.IntDef",
    "androidx.annotation.IntDef",
    "android.annotation.IntDef",
)

NULLNESS_ANNOTATIONS = {
    "Nullable",
    "NonNull",
    "NotNull",
    "Nonnull",
    "RecentlyNullable",
    "RecentlyNonNull",
}
