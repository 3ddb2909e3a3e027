#!/usr/bin/env python3
"""
Package a playingcards.io template and its images into a .pcio archive.

The archive is a plain zip file holding:
  - widgets.json          the template, re-serialized as compact JSON
  - userassets/<name>     one entry per regular file in the images directory

Usage:
  python -m pcio.packager
  python -m pcio.packager --template template.json --images images --out output.pcio
"""

import argparse
import io
import json
import logging
import os
import tempfile
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pcio.errors import PcioError

logger = logging.getLogger(__name__)

MANIFEST_ENTRY = "widgets.json"
ASSET_PREFIX = "userassets/"

# Fixed entry timestamp so identical inputs give identical archives
ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)


class PackagingError(PcioError):
    """Error while reading inputs or writing the archive."""
    pass


@dataclass
class PackageResult:
    """Outcome of a packaging run."""
    output_path: Path
    entries: list[str] = field(default_factory=list)

    @property
    def asset_count(self) -> int:
        return sum(1 for name in self.entries if name.startswith(ASSET_PREFIX))


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def load_template(template_path: Path) -> Any:
    """Load the widget template. The value is opaque to the packager."""
    try:
        with open(template_path, "r", encoding="utf-8") as f:
            return json.load(f, parse_constant=_reject_constant)
    except FileNotFoundError as e:
        raise PackagingError(f"Template not found: {template_path}") from e
    except ValueError as e:
        raise PackagingError(f"Malformed JSON in {template_path}: {e}") from e


def serialize_template(value: Any) -> str:
    """Serialize the template compactly, keeping non-ASCII text as-is."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)


def iter_asset_files(images_dir: Path) -> list[Path]:
    """Return the regular files directly inside images_dir, sorted by name."""
    if not images_dir.is_dir():
        raise PackagingError(f"Images directory not found: {images_dir}")

    files = []
    for entry in images_dir.iterdir():
        if not entry.is_file():
            logger.debug(f"  Skipping {entry.name} (not a regular file)")
            continue
        files.append(entry)
    return sorted(files, key=lambda p: p.name)


def _entry_info(name: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=ENTRY_DATE_TIME)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.external_attr = 0o644 << 16
    return info


def build_archive(template_value: Any, asset_files: list[Path]) -> tuple[bytes, list[str]]:
    """Build the archive in memory.

    Args:
        template_value: Parsed template JSON
        asset_files: Files to add under ASSET_PREFIX

    Returns:
        (archive bytes, entry names in archive order)
    """
    entries = [MANIFEST_ENTRY]
    buffer = io.BytesIO()

    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(_entry_info(MANIFEST_ENTRY), serialize_template(template_value).encode("utf-8"))
        for asset in asset_files:
            name = f"{ASSET_PREFIX}{asset.name}"
            zf.writestr(_entry_info(name), asset.read_bytes())
            entries.append(name)
            logger.debug(f"    {name}")

    return buffer.getvalue(), entries


def _write_atomic(output_path: Path, data: bytes) -> None:
    """Write data next to output_path, then replace it in one step."""
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent)
    except OSError as e:
        raise PackagingError(f"Cannot write {output_path}: {e}") from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, output_path)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise PackagingError(f"Cannot write {output_path}: {e}") from e


def package_assets(template_path: Path, images_dir: Path, output_path: Path) -> PackageResult:
    """
    Package the template and every image into a .pcio archive.

    Overwrites output_path. Raises PackagingError if the template is missing
    or malformed, the images directory does not exist, or the archive cannot
    be written.
    """
    template_value = load_template(template_path)
    asset_files = iter_asset_files(images_dir)

    logger.info(f"Packaging {len(asset_files)} asset(s) from {images_dir}")
    data, entries = build_archive(template_value, asset_files)
    _write_atomic(output_path, data)

    logger.info(f"Wrote {output_path} ({len(entries)} entries, {len(data)} bytes)")
    return PackageResult(output_path=output_path, entries=entries)


def read_archive_entries(archive_path: Path) -> dict[str, bytes]:
    """Read every entry of an archive, keyed by entry name."""
    try:
        with zipfile.ZipFile(archive_path) as zf:
            return {info.filename: zf.read(info) for info in zf.infolist()}
    except FileNotFoundError as e:
        raise PackagingError(f"Archive not found: {archive_path}") from e
    except zipfile.BadZipFile as e:
        raise PackagingError(f"Not a valid archive: {archive_path}") from e


def main() -> int:
    parser = argparse.ArgumentParser(description="Package template.json and images/ into a .pcio archive")
    parser.add_argument("--template", default="template.json", help="Template JSON file")
    parser.add_argument("--images", default="images", help="Images directory")
    parser.add_argument("--out", default="output.pcio", help="Output archive path")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    try:
        package_assets(Path(args.template), Path(args.images), Path(args.out))
    except PackagingError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
