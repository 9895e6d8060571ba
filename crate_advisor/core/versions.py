"""Version ordering for crate version strings.

Versions are kept as the raw strings they arrive as. Ordering parses them as
strict SemVer 2.0 on demand; a string that does not parse still takes part in
comparisons and always ranks below any string that does. Two unparseable
strings compare equal.
"""

import functools
from typing import Callable, Iterable, List, Optional

from semver import Version


def parse_version(raw: str) -> Optional[Version]:
    """Parse ``raw`` as a strict semantic version.

    Args:
        raw: Version string, used exactly as given (no trimming, no ``v`` prefix)

    Returns:
        The parsed version, or None when ``raw`` is not strict SemVer
    """
    try:
        return Version.parse(raw)
    except (ValueError, TypeError):
        return None


def _compare_build_identifier(left: str, right: str) -> int:
    left_numeric = left.isdigit()
    right_numeric = right.isdigit()

    if left_numeric and right_numeric:
        # 0 < 00 < 1 < 01 < 2 < 10
        left_value = left.lstrip("0")
        right_value = right.lstrip("0")
        left_key = (len(left_value), left_value, len(left))
        right_key = (len(right_value), right_value, len(right))
    elif left_numeric != right_numeric:
        return -1 if left_numeric else 1
    else:
        left_key, right_key = left, right

    return (left_key > right_key) - (left_key < right_key)


def compare_build(left: Optional[str], right: Optional[str]) -> int:
    """Order build metadata after SemVer precedence has tied.

    No metadata ranks lowest. Otherwise dot-separated identifiers are compared
    in turn: numeric ones by value then by length, numeric below alphanumeric,
    alphanumeric ones as ASCII. A shorter list that is a prefix of the other
    ranks lower.
    """
    if not left or not right:
        return bool(left) - bool(right)

    left_parts = left.split(".")
    right_parts = right.split(".")
    for left_part, right_part in zip(left_parts, right_parts):
        result = _compare_build_identifier(left_part, right_part)
        if result:
            return result
    return (len(left_parts) > len(right_parts)) - (len(left_parts) < len(right_parts))


def compare_versions(left: str, right: str) -> int:
    """Three-way comparison of two version strings.

    Returns a negative number when ``left`` ranks below ``right``, zero when
    they rank equal and a positive number otherwise. Parseable versions are
    ordered by SemVer precedence and then by build metadata, so two parseable
    versions rank equal only when they are the same version.
    """
    left_version = parse_version(left)
    right_version = parse_version(right)

    if left_version is not None and right_version is not None:
        return left_version.compare(right_version) or compare_build(left_version.build, right_version.build)
    if left_version is not None:
        return 1
    if right_version is not None:
        return -1
    return 0


version_sort_key: Callable[[str], object] = functools.cmp_to_key(compare_versions)


def sort_descending(versions: Iterable[str]) -> List[str]:
    """Sort version strings from highest to lowest.

    The sort is stable: strings that rank equal keep their input order, which
    decides who lands where when a query equals one of its bounds.
    """
    return sorted(versions, key=version_sort_key, reverse=True)
