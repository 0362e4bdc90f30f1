"""
Semantic versions of the remote API servers.

Kubernetes reports its version as ``gitVersion`` in the ``/version`` endpoint,
e.g. ``v1.19.3`` or ``v1.21.0-gke.1000`` or ``v1.22.1+k3s1``.
These strings are parsed into comparable `SemanticVersion` values,
ordered as per https://semver.org/#spec-item-11:

* major, minor, patch are compared numerically;
* a version with a pre-release suffix is lower than the same version without it;
* pre-release identifiers are compared one by one: numerically if both are
  numeric, lexically otherwise; numeric identifiers are lower than textual ones;
* build metadata (after ``+``) does not participate in the ordering.

The leading ``v`` and the absent minor/patch parts are tolerated
(``1.9`` is the same as ``v1.9.0``), since the servers are not always strict.
"""
import dataclasses
import functools
import re
from typing import Any, Optional, Tuple, Union

VERSION_RE = re.compile(
    r'^\s*v?(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?'
    r'(?:-(?P<prerelease>[0-9A-Za-z.-]+))?'
    r'(?:\+(?P<build>[0-9A-Za-z.-]+))?\s*$'
)

VersionLike = Union[str, "SemanticVersion"]


class InvalidVersionError(ValueError):
    pass


@functools.total_ordering
@dataclasses.dataclass(frozen=True, eq=False)
class SemanticVersion:
    major: int
    minor: int = 0
    patch: int = 0
    prerelease: Optional[str] = None
    build: Optional[str] = None

    @classmethod
    def parse(cls, text: VersionLike) -> "SemanticVersion":
        if isinstance(text, SemanticVersion):
            return text
        if not isinstance(text, str):
            raise InvalidVersionError(f"A version must be a string, got {text!r}.")
        match = VERSION_RE.match(text)
        if match is None:
            raise InvalidVersionError(f"Unparseable version: {text!r}.")
        return cls(
            major=int(match.group('major')),
            minor=int(match.group('minor') or 0),
            patch=int(match.group('patch') or 0),
            prerelease=match.group('prerelease'),
            build=match.group('build'),
        )

    def __str__(self) -> str:
        text = f'{self.major}.{self.minor}.{self.patch}'
        text += f'-{self.prerelease}' if self.prerelease else ''
        text += f'+{self.build}' if self.build else ''
        return text

    @property
    def _key(self) -> Tuple[Any, ...]:
        # A release (no pre-release) is higher than any of its pre-releases.
        if self.prerelease is None:
            prerelease: Tuple[Any, ...] = (1,)
        else:
            prerelease = (0,) + tuple(
                (0, int(part), '') if part.isdigit() else (1, 0, part)
                for part in self.prerelease.split('.')
            )
        return (self.major, self.minor, self.patch, prerelease)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (str, SemanticVersion)):
            try:
                return self._key == SemanticVersion.parse(other)._key
            except InvalidVersionError:
                return False
        return NotImplemented

    def __lt__(self, other: VersionLike) -> bool:
        if isinstance(other, (str, SemanticVersion)):
            return self._key < SemanticVersion.parse(other)._key
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key)
