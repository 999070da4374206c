"""
Semantic version parsing (pure).

SDK versions are NuGet-flavoured SemVer: two to four numeric parts
(missing parts are zero, leading zeros are tolerated), an optional
``-prerelease`` label and optional ``+metadata``.
No I/O, no subprocess.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

_VERSION_RE = re.compile(
    r"^(?P<major>\d+)"
    r"\.(?P<minor>\d+)"
    r"(?:\.(?P<patch>\d+))?"
    r"(?:\.(?P<revision>\d+))?"
    r"(?:-(?P<pre>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<meta>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


class InvalidVersion(ValueError):
    """Raised when a string is not a semantic version."""


@total_ordering
@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """A parsed semantic version with SemVer 2.0 precedence.

    Build metadata is kept for display but ignored by comparisons.
    """

    major: int
    minor: int
    patch: int
    revision: int = 0
    prerelease: tuple[str, ...] = ()
    metadata: str = ""

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse ``text`` or raise :class:`InvalidVersion`."""
        match = _VERSION_RE.match(text.strip())
        if not match:
            raise InvalidVersion(f"Not a semantic version: {text!r}")

        pre = match.group("pre")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch") or 0),
            revision=int(match.group("revision") or 0),
            prerelease=tuple(pre.split(".")) if pre else (),
            metadata=match.group("meta") or "",
        )

    @classmethod
    def try_parse(cls, text: str) -> SemanticVersion | None:
        """Parse ``text``, returning None instead of raising."""
        try:
            return cls.parse(text)
        except InvalidVersion:
            return None

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    @property
    def release(self) -> tuple[int, int, int, int]:
        return (self.major, self.minor, self.patch, self.revision)

    def _precedence(self) -> tuple:
        # A release sorts above any of its prereleases.
        if not self.prerelease:
            return (self.release, 1, ())
        labels = tuple(
            (0, int(part), "") if part.isdigit() else (1, 0, part.lower())
            for part in self.prerelease
        )
        return (self.release, 0, labels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence() == other._precedence()

    def __lt__(self, other: SemanticVersion) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence() < other._precedence()

    def __hash__(self) -> int:
        return hash(self._precedence())

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.revision:
            text += f".{self.revision}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.metadata:
            text += "+" + self.metadata
        return text


def feature_band(version: SemanticVersion) -> str:
    """Return the SDK feature band for a version.

    ``6.0.105`` → ``6.0.100``; ``6.0.100-preview.7.21379.14`` →
    ``6.0.100-preview.7``.
    """
    band = f"{version.major}.{version.minor}.{version.patch // 100 * 100}"
    if version.prerelease:
        band += "-" + ".".join(version.prerelease[:2])
    return band
