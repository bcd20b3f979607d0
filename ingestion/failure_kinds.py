# Folder: issuewatch/ingestion/failure_kinds.py
#
# Maps failure-kind names (strings from config) back to classes so the
# reporter can do is-a checks: ignoring "Exception" also ignores RuntimeError.
#
# A name that can't be resolved is NOT an error - it just never matches.

import builtins
import importlib
import logging
from functools import lru_cache
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def resolve_kind(name: str) -> Optional[type]:
    """
    "RuntimeError"             -> builtins.RuntimeError
    "payments.errors.Declined" -> imported from payments.errors
    "Outer.Inner" style nested classes are walked attribute by attribute.

    Returns None when nothing (or a non-class) is found.
    """
    if not name or not name.strip():
        return None
    name = name.strip()

    if "." not in name:
        found = getattr(builtins, name, None)
        return found if isinstance(found, type) else None

    parts = name.split(".")

    # Longest importable module prefix wins, the rest are attributes
    for split_at in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split_at])
        try:
            target = importlib.import_module(module_name)
        except ImportError:
            continue
        except Exception as e:
            # Importing a module can run arbitrary code
            logger.debug(f"Importing {module_name} failed: {e}")
            return None

        for attr in parts[split_at:]:
            target = getattr(target, attr, None)
            if target is None:
                return None
        return target if isinstance(target, type) else None

    return None


def is_ignored(kind: str, ignored_names: Iterable[str]) -> bool:
    """
    True if the failure kind is one of the ignored names or a subclass of one.
    If the kind itself can't be resolved we fall back to exact name match.
    """
    ignored_names = list(ignored_names)
    if not ignored_names:
        return False

    kind_type = resolve_kind(kind)

    for ignored in ignored_names:
        if kind_type is None:
            if ignored.strip() == kind:
                return True
            continue

        ignored_type = resolve_kind(ignored)
        if ignored_type is not None and issubclass(kind_type, ignored_type):
            return True

    return False
