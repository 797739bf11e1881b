from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import structlog

from accel.catalog.motion import Motion
from accel.catalog.template import Template, load_template
from accel.core.errors import CatalogError

log = structlog.get_logger()

def disambiguate(template: Template, filename: str) -> Optional[str]:
    """
    Base name shared by a motion's add and sub files, or None when filename
    is not a motion file.

    ``001-users.add.sql`` -> ``001-users.sql``

    Only the operation tag in front of the extension is dropped, so a name
    like ``drop.subscriptions`` keeps its own dots.
    """
    m = template.pattern.match(filename)
    if m is None:
        return None
    return filename[: m.start(3) - 1] + filename[m.end(3) :]


def discover(directory: Path) -> tuple[Motion, ...]:
    """
    Read every motion pair in directory, ordered by filename.

    Raises CatalogError when the template is missing or an add/sub file has
    no counterpart.
    """
    template = load_template(directory)
    return _discover_with(directory, template)


def _discover_with(directory: Path, template: Template) -> tuple[Motion, ...]:
    pattern = template.pattern

    adds: dict[str, str] = {}
    subs: dict[str, str] = {}
    for filename in sorted(p.name for p in directory.iterdir() if p.is_file()):
        m = pattern.match(filename)
        if m is None:
            continue
        name = disambiguate(template, filename)
        assert name is not None
        bucket = adds if m.group(3).lower() == "add" else subs
        bucket[name] = filename

    orphans = sorted(set(adds) ^ set(subs))
    if orphans:
        raise CatalogError(f"motions without a matching add/sub counterpart: {orphans}")

    motions: list[Motion] = []
    for name in sorted(adds, key=lambda n: adds[n]):
        add_name = adds[name]
        sub_name = subs[name]
        m = pattern.match(add_name)
        assert m is not None
        motions.append(
            Motion(
                name=name,
                forward=(directory / add_name).read_text(encoding="utf-8"),
                backward=(directory / sub_name).read_text(encoding="utf-8"),
                version=tuple(int(part) for part in m.group(1).split(".")),
                forward_name=add_name,
                backward_name=sub_name,
            )
        )

    log.debug("catalog.discovered", directory=str(directory), motions=len(motions))
    return tuple(motions)


def next_version(template: Template, motions: tuple[Motion, ...]) -> tuple[int, ...]:
    if motions:
        version = list(motions[-1].version)
    else:
        version = [0] * len(template.widths)
    version[-1] += 1
    return tuple(version)


def create(directory: Path, name: str) -> tuple[Path, Path]:
    """
    Scaffold a new motion pair from the directory template.

    The new version is the last motion's version with its least significant
    component incremented. Returns (add_path, sub_path).
    """
    if not name or os.sep in name or (os.altsep and os.altsep in name):
        raise CatalogError(f"invalid motion name: {name!r}")

    template = load_template(directory)
    motions = _discover_with(directory, template)

    add_name, sub_name = template.filenames(next_version(template, motions), name)
    add_path = directory / add_name
    sub_path = directory / sub_name

    for path in (add_path, sub_path):
        if path.exists():
            raise CatalogError(f"motion file already exists: {path}")

    add_path.write_text(template.add_body, encoding="utf-8")
    sub_path.write_text(template.sub_body, encoding="utf-8")

    log.info("catalog.created", directory=str(directory), add=add_name, sub=sub_name)
    return add_path, sub_path
