"""
VersionValue — parsed, totally ordered version numbers.

Keg directories under ``Cellar/<name>/`` and the ``versions.stable``
field of ``brew info`` are both parsed into this type, so that
"which version is newest" never falls back to string ordering
(``1.10.0`` > ``1.9.0``).

Accepted grammar::

    [v]N[.N]*[-PRERELEASE][+BUILD][_REVISION]

``_REVISION`` is Homebrew's keg revision suffix (``1.2.3_1``).
Missing trailing components compare as zero (``2.0 == 2.0.0``).
Anything else raises ``ParseError``: an unparsable keg directory
must be reported, never silently sorted first or last.
"""

from __future__ import annotations

import re
from functools import total_ordering

from brewdeps.core.errors import ParseError

_IDENTS = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"

_VERSION_RE = re.compile(
    rf"""
    ^v?
    (?P<release>\d+(?:\.\d+)*)
    (?:-(?P<pre>{_IDENTS}))?
    (?:\+(?P<build>{_IDENTS}))?
    (?:_(?P<revision>\d+))?
    $
    """,
    re.VERBOSE,
)


def _ident_key(ident: str) -> tuple[int, int, str]:
    # Numeric identifiers sort before alphanumeric ones
    if ident.isdigit():
        return (0, int(ident), "")
    return (1, 0, ident)


@total_ordering
class VersionValue:
    """An immutable, comparable version number.

    Build with ``VersionValue.parse(text)``; ``str()`` gives back the
    original text, which is also the keg directory name.
    """

    __slots__ = ("release", "prerelease", "build", "revision", "text")

    def __init__(
        self,
        release: tuple[int, ...],
        prerelease: tuple[str, ...] = (),
        build: tuple[str, ...] = (),
        revision: int = 0,
        text: str | None = None,
    ) -> None:
        if not release:
            raise ParseError("A version needs at least one numeric component")
        object.__setattr__(self, "release", tuple(release))
        object.__setattr__(self, "prerelease", tuple(prerelease))
        object.__setattr__(self, "build", tuple(build))
        object.__setattr__(self, "revision", revision)
        object.__setattr__(self, "text", text or self._render())

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def parse(cls, text: str) -> VersionValue:
        """Parse a version string, raising ``ParseError`` if malformed."""
        if not isinstance(text, str):
            raise ParseError(f"Version must be a string, got {type(text).__name__}")
        m = _VERSION_RE.match(text.strip())
        if not m:
            raise ParseError(f"Invalid version string: {text!r}")
        return cls(
            release=tuple(int(x) for x in m["release"].split(".")),
            prerelease=tuple(m["pre"].split(".")) if m["pre"] else (),
            build=tuple(m["build"].split(".")) if m["build"] else (),
            revision=int(m["revision"] or 0),
            text=text.strip(),
        )

    @property
    def major(self) -> int:
        return self.release[0]

    @property
    def minor(self) -> int:
        return self.release[1] if len(self.release) > 1 else 0

    @property
    def patch(self) -> int:
        return self.release[2] if len(self.release) > 2 else 0

    def _render(self) -> str:
        out = ".".join(str(n) for n in self.release)
        if self.prerelease:
            out += "-" + ".".join(self.prerelease)
        if self.build:
            out += "+" + ".".join(self.build)
        if self.revision:
            out += f"_{self.revision}"
        return out

    def _key(self) -> tuple:
        release = list(self.release)
        while len(release) > 1 and release[-1] == 0:
            release.pop()
        # A release sorts after all of its prereleases...
        if self.prerelease:
            pre = (0, tuple(_ident_key(i) for i in self.prerelease))
        else:
            pre = (1, ())
        # ...and before any of its builds
        if self.build:
            build = (1, tuple(_ident_key(i) for i in self.build))
        else:
            build = (0, ())
        return (tuple(release), pre, build, self.revision)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionValue):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionValue):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"VersionValue({self.text!r})"
