"""Advisory data models for crate-advisor."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Iterable, Tuple, Union

from .constraints import CLAUSE_SEPARATOR, ConstraintExpression

ADVISORY_URL_TEMPLATE = "https://rustsec.org/advisories/{id}.html"
ALIAS_SEPARATOR = ";"
TARGET_SEPARATOR = "/"


def advisory_url(advisory_id: str) -> str:
    """Public advisory page for an advisory id."""
    return ADVISORY_URL_TEMPLATE.format(id=advisory_id)


def split_aliases(aliases: Union[str, Iterable[str], None]) -> Tuple[str, ...]:
    """Normalize an aliases field to a tuple.

    Stored aliases are a single ``;``-joined string; lists pass through.
    """
    if aliases is None:
        return ()
    if isinstance(aliases, str):
        return tuple(aliases.split(ALIAS_SEPARATOR))
    return tuple(aliases)


@dataclass(frozen=True)
class AdvisorySummary:
    """The matching rule of one advisory for one crate."""

    id: str
    crate_name: str
    patched: ConstraintExpression
    aliases: Tuple[str, ...] = ()
    short_description: str = ""

    def __post_init__(self) -> None:
        """Validate summary data."""
        if not self.id:
            raise ValueError("Advisory ID cannot be empty")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdvisorySummary":
        """Build a summary from a raw record.

        Accepts ``crate_name`` or ``cratename``, and ``short_description`` or
        ``small_desc``, as stored advisory snapshots use either spelling. A
        list-valued ``patched`` is joined into one OR-expression.
        """
        patched = data.get("patched") or ""
        if isinstance(patched, list):
            patched = CLAUSE_SEPARATOR.join(patched)

        return cls(
            id=data.get("id", ""),
            crate_name=data.get("crate_name", data.get("cratename", "")),
            patched=ConstraintExpression.parse(patched),
            aliases=split_aliases(data.get("aliases")),
            short_description=data.get("short_description", data.get("small_desc", "")),
        )


@dataclass(frozen=True)
class AdvisoryDetail:
    """Full advisory record returned for an exposed crate version.

    ``unaffected`` is carried for display only; matching never reads it.
    """

    id: str
    subtitle: str = ""
    reported: str = ""
    issued: str = ""
    affected_package: str = ""
    advisory_type: str = ""
    keywords: str = ""
    aliases: str = ""
    reference: str = ""
    patched: str = ""
    unaffected: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Advisory ID cannot be empty")

    @property
    def url(self) -> str:
        return advisory_url(self.id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdvisoryDetail":
        """Build a detail record from a raw record.

        ``package`` and ``type`` are accepted as aliases of
        ``affected_package`` and ``advisory_type``. A list-valued ``keywords``
        or ``aliases`` is joined with ``;``, a list-valued ``patched`` or
        ``unaffected`` with ``|``. Unknown keys, including a stored
        ``url``, are ignored.
        """
        values: Dict[str, Any] = {}
        for name in (f.name for f in fields(cls)):
            if name in data:
                values[name] = data[name]
        if "affected_package" not in values and "package" in data:
            values["affected_package"] = data["package"]
        if "advisory_type" not in values and "type" in data:
            values["advisory_type"] = data["type"]

        for name in ("keywords", "aliases"):
            if isinstance(values.get(name), list):
                values[name] = ALIAS_SEPARATOR.join(values[name])
        for name in ("patched", "unaffected"):
            if isinstance(values.get(name), list):
                values[name] = CLAUSE_SEPARATOR.join(values[name])
        for name, value in list(values.items()):
            if value is None:
                values[name] = ""
        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        """Serialize including the derived ``url``."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["url"] = self.url
        return data


@dataclass(frozen=True, order=True)
class ResolutionTarget:
    """A crate name and version to resolve, written ``name/version``."""

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}{TARGET_SEPARATOR}{self.version}"


def parse_target(text: str) -> ResolutionTarget:
    """Parse a ``name/version`` target string.

    Raises:
        ValueError: If ``text`` does not contain exactly one ``/``
    """
    parts = text.split(TARGET_SEPARATOR)
    if len(parts) != 2:
        raise ValueError(f"Invalid target {text!r}: expected 'name/version'")
    return ResolutionTarget(name=parts[0], version=parts[1])
