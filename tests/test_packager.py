from __future__ import annotations

import json
from pathlib import Path

import pytest

from pcio.packager import (
    ASSET_PREFIX,
    MANIFEST_ENTRY,
    PackagingError,
    package_assets,
    read_archive_entries,
    serialize_template,
)

from tests.conftest import TEMPLATE


def make_images(tmp_path: Path, names: list[str]) -> Path:
    images = tmp_path / 'images'
    images.mkdir(exist_ok=True)
    for name in names:
        (images / name).write_bytes(f'data-{name}'.encode('utf-8'))
    return images


def write_template(tmp_path: Path, value) -> Path:
    path = tmp_path / 'template.json'
    path.write_text(json.dumps(value), encoding='utf-8')
    return path


def test_manifest_round_trips(project: Path) -> None:
    output = project / 'output.pcio'
    package_assets(project / 'template.json', project / 'images', output)
    entries = read_archive_entries(output)
    assert json.loads(entries[MANIFEST_ENTRY].decode('utf-8')) == TEMPLATE


def test_serialize_template_is_compact_and_keeps_unicode() -> None:
    assert serialize_template({'a': 1, 'b': [1, 2], 'c': 'é'}) == '{"a":1,"b":[1,2],"c":"é"}'


def test_one_entry_per_file(tmp_path: Path) -> None:
    template = write_template(tmp_path, {'widgets': []})
    images = make_images(tmp_path, ['a', 'b', 'c'])
    output = tmp_path / 'output.pcio'

    result = package_assets(template, images, output)

    entries = read_archive_entries(output)
    assert set(entries) == {MANIFEST_ENTRY, 'userassets/a', 'userassets/b', 'userassets/c'}
    assert entries['userassets/b'] == b'data-b'
    assert result.asset_count == 3


def test_subdirectories_are_skipped(tmp_path: Path) -> None:
    template = write_template(tmp_path, {})
    images = make_images(tmp_path, ['one.png', 'two.png'])
    (images / 'nested').mkdir()
    (images / 'nested' / 'three.png').write_bytes(b'x')
    output = tmp_path / 'output.pcio'

    package_assets(template, images, output)

    asset_names = [n for n in read_archive_entries(output) if n.startswith(ASSET_PREFIX)]
    assert sorted(asset_names) == ['userassets/one.png', 'userassets/two.png']


def test_empty_images_dir(tmp_path: Path) -> None:
    template = write_template(tmp_path, [1, 2, 3])
    images = make_images(tmp_path, [])
    output = tmp_path / 'output.pcio'

    package_assets(template, images, output)

    assert list(read_archive_entries(output)) == [MANIFEST_ENTRY]


def test_missing_template(tmp_path: Path) -> None:
    images = make_images(tmp_path, ['a'])
    with pytest.raises(PackagingError):
        package_assets(tmp_path / 'template.json', images, tmp_path / 'output.pcio')
    assert not (tmp_path / 'output.pcio').exists()


@pytest.mark.parametrize('text', ['{"widgets": [', 'not json', '{"x": NaN}'])
def test_malformed_template(tmp_path: Path, text: str) -> None:
    (tmp_path / 'template.json').write_text(text, encoding='utf-8')
    images = make_images(tmp_path, ['a'])
    with pytest.raises(PackagingError):
        package_assets(tmp_path / 'template.json', images, tmp_path / 'output.pcio')


def test_missing_images_dir(tmp_path: Path) -> None:
    template = write_template(tmp_path, {})
    with pytest.raises(PackagingError):
        package_assets(template, tmp_path / 'images', tmp_path / 'output.pcio')


def test_unwritable_output(tmp_path: Path) -> None:
    template = write_template(tmp_path, {})
    images = make_images(tmp_path, ['a'])
    with pytest.raises(PackagingError):
        package_assets(template, images, tmp_path / 'missing' / 'output.pcio')


def test_overwrites_existing_output(project: Path) -> None:
    output = project / 'output.pcio'
    output.write_bytes(b'stale')

    package_assets(project / 'template.json', project / 'images', output)

    assert MANIFEST_ENTRY in read_archive_entries(output)
    leftovers = [p.name for p in project.iterdir() if p.name.endswith('.tmp')]
    assert leftovers == []


def test_repeat_runs_are_identical(project: Path) -> None:
    first = project / 'first.pcio'
    second = project / 'second.pcio'
    package_assets(project / 'template.json', project / 'images', first)
    package_assets(project / 'template.json', project / 'images', second)
    assert first.read_bytes() == second.read_bytes()


def test_read_archive_rejects_garbage(tmp_path: Path) -> None:
    bogus = tmp_path / 'bogus.pcio'
    bogus.write_bytes(b'not a zip')
    with pytest.raises(PackagingError):
        read_archive_entries(bogus)
