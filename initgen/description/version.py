"""Platform version parsing and ordering."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

_VERSION_RE = re.compile(
    r"^(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?(?:(?P<separator>[.-])(?P<qualifier>[A-Za-z0-9][A-Za-z0-9.-]*))?$"
)


class Version(BaseModel):
    """A ``major.minor.patch[.qualifier]`` version.

    Equality, hashing and ordering ignore the qualifier separator, so
    ``2.0.0.M1`` and ``2.0.0-M1`` are the same version.

    Numeric components compare numerically.  When they are equal, qualifiers
    compare lexicographically, and a version with no qualifier ranks after
    every qualified one (``2.0.0.M1 < 2.0.0.RC1 < 2.0.0``).
    """

    model_config = ConfigDict(frozen=True)

    major: int = Field(..., ge=0)
    minor: int = Field(default=0, ge=0)
    patch: int = Field(default=0, ge=0)
    qualifier: str | None = Field(default=None)
    separator: str = Field(default=".", pattern=r"^[.-]$")

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse *text* such as ``"2.0.0.M1"`` or ``"2.2.0-SNAPSHOT"``.

        Raises:
            ValueError: If *text* is not a recognisable version.
        """
        match = _VERSION_RE.match(text.strip())
        if match is None:
            raise ValueError(f"Invalid version format: {text!r}")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor") or 0),
            patch=int(match.group("patch") or 0),
            qualifier=match.group("qualifier"),
            separator=match.group("separator") or ".",
        )

    def _key(self) -> tuple[int, int, int, int, str]:
        if self.qualifier is None:
            return (self.major, self.minor, self.patch, 1, "")
        return (self.major, self.minor, self.patch, 0, self.qualifier)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() >= other._key()

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.qualifier:
            return f"{base}{self.separator}{self.qualifier}"
        return base
