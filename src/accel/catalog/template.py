from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from accel.core.errors import CatalogError

_TEMPLATE_ADD_RE = re.compile(r"^([x.]+)([\-_ ~]+)template\.add(.*)$", re.IGNORECASE)
_TEMPLATE_SUB_RE = re.compile(r"^([x.]+)([\-_ ~]+)template\.sub(.*)$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Template:
    """
    Naming convention and bodies taken from a directory's template pair.

    A template named ``xxx.xx-template.add.sql`` means:
      - version: two components, widths 3 and 2 (``001.07``)
      - separator: ``-``
      - extension: ``.sql``
    """

    widths: tuple[int, ...]
    separator: str
    extension: str

    add_body: str
    sub_body: str

    @property
    def pattern(self) -> re.Pattern[str]:
        version = r"\.".join(rf"\d{{{w}}}" for w in self.widths)
        return re.compile(
            rf"^({version}){re.escape(self.separator)}(.+)\.(add|sub){re.escape(self.extension)}$",
            re.IGNORECASE,
        )

    def format_version(self, version: tuple[int, ...]) -> str:
        parts: list[str] = []
        for num, width in zip(version, self.widths, strict=True):
            s = str(num).zfill(width)
            if len(s) != width:
                raise CatalogError(f"version component {s!r} does not fit width {width}")
            parts.append(s)
        return ".".join(parts)

    def filenames(self, version: tuple[int, ...], name: str) -> tuple[str, str]:
        stem = f"{self.format_version(version)}{self.separator}{name}"
        return f"{stem}.add{self.extension}", f"{stem}.sub{self.extension}"


def load_template(directory: Path) -> Template:
    """
    Find the single template pair in directory and derive the naming convention.
    """
    if not directory.is_dir():
        raise CatalogError(f"motions directory not found: {directory}")

    names = sorted(p.name for p in directory.iterdir() if p.is_file())
    adds = [n for n in names if _TEMPLATE_ADD_RE.match(n)]
    subs = [n for n in names if _TEMPLATE_SUB_RE.match(n)]

    if not adds or not subs:
        raise CatalogError(f"no valid template in directory {directory}")
    if len(adds) > 1 or len(subs) > 1:
        raise CatalogError(f"more than one template in directory {directory}: {adds + subs}")

    add_match = _TEMPLATE_ADD_RE.match(adds[0])
    sub_match = _TEMPLATE_SUB_RE.match(subs[0])
    assert add_match is not None and sub_match is not None

    if add_match.groups() != sub_match.groups():
        raise CatalogError(f"template {adds[0]!r} does not match {subs[0]!r}")

    placeholder, separator, extension = add_match.groups()
    widths = tuple(len(part) for part in placeholder.split("."))
    if any(w == 0 for w in widths):
        raise CatalogError(f"malformed version placeholder {placeholder!r} in {adds[0]!r}")

    return Template(
        widths=widths,
        separator=separator,
        extension=extension,
        add_body=(directory / adds[0]).read_text(encoding="utf-8"),
        sub_body=(directory / subs[0]).read_text(encoding="utf-8"),
    )
