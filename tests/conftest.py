from __future__ import annotations

import json
from pathlib import Path

import pytest
from PIL import ImageFont

from pcio.config import ENV_VARS
from pcio.rules import fonts as rules_fonts
from pcio.rules.fonts import MEASURE_SIZE, FontSet

TEMPLATE = {
    'widgets': [
        {'id': 'deck', 'type': 'cardDeck', 'x': 10, 'y': 20, 'faceTemplates': []},
        {'id': 'label', 'type': 'label', 'text': 'Règles du jeu'},
    ],
    'version': 1,
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def font_set() -> FontSet:
    # Pillow's bundled FreeType face stands in for Verdana
    face = ImageFont.load_default(size=MEASURE_SIZE)
    return FontSet(regular=face, bold=face)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / 'template.json').write_text(json.dumps(TEMPLATE), encoding='utf-8')
    images = tmp_path / 'images'
    images.mkdir()
    (images / 'card_back.png').write_bytes(b'\x89PNG\r\n\x1a\nback')
    (images / 'card_01.png').write_bytes(b'\x89PNG\r\n\x1a\nface')
    return tmp_path


@pytest.fixture
def stub_fonts(monkeypatch: pytest.MonkeyPatch, project: Path, font_set: FontSet) -> Path:
    fonts_dir = project / 'fonts'
    fonts_dir.mkdir()
    (fonts_dir / 'verdana.woff').write_bytes(b'wOFF')
    (fonts_dir / 'verdana-bold.woff').write_bytes(b'wOFF')
    monkeypatch.setattr(rules_fonts, '_open_font', lambda path: font_set.regular)
    return fonts_dir
