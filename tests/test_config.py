from __future__ import annotations

from pathlib import Path

import pytest

from pcio.config import BuildConfig, ConfigError


def test_defaults(tmp_path: Path) -> None:
    config = BuildConfig.load(tmp_path)
    assert config.template == tmp_path / 'template.json'
    assert config.images_dir == tmp_path / 'images'
    assert config.rules == tmp_path / 'rules.md'
    assert config.font_regular == tmp_path / 'fonts' / 'verdana.woff'
    assert config.font_bold == tmp_path / 'fonts' / 'verdana-bold.woff'
    assert config.output == tmp_path / 'output.pcio'


def test_yaml_overrides(tmp_path: Path) -> None:
    (tmp_path / 'pcio.yml').write_text('output: dist/game.pcio\nimages_dir: art\n', encoding='utf-8')
    config = BuildConfig.load(tmp_path)
    assert config.output == tmp_path / 'dist' / 'game.pcio'
    assert config.images_dir == tmp_path / 'art'
    assert config.template == tmp_path / 'template.json'


def test_empty_yaml(tmp_path: Path) -> None:
    (tmp_path / 'pcio.yml').write_text('', encoding='utf-8')
    assert BuildConfig.load(tmp_path).output == tmp_path / 'output.pcio'


@pytest.mark.parametrize('text', ['outptu: x.pcio\n', 'output: 3\n', '- a\n- b\n', 'output: [\n'])
def test_invalid_yaml(tmp_path: Path, text: str) -> None:
    (tmp_path / 'pcio.yml').write_text(text, encoding='utf-8')
    with pytest.raises(ConfigError):
        BuildConfig.load(tmp_path)


def test_environment_beats_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / 'pcio.yml').write_text('output: from_yaml.pcio\n', encoding='utf-8')
    monkeypatch.setenv('PCIO_OUTPUT', 'from_env.pcio')
    assert BuildConfig.load(tmp_path).output == tmp_path / 'from_env.pcio'


def test_dotenv_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / '.env').write_text('PCIO_RULES=docs/rules.md\nPCIO_OUTPUT=dotenv.pcio\n', encoding='utf-8')
    monkeypatch.setenv('PCIO_OUTPUT', 'real_env.pcio')
    config = BuildConfig.load(tmp_path)
    assert config.rules == tmp_path / 'docs' / 'rules.md'
    assert config.output == tmp_path / 'real_env.pcio'


def test_explicit_overrides_win(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('PCIO_OUTPUT', 'from_env.pcio')
    config = BuildConfig.load(tmp_path, output=Path('cli.pcio'), template=None)
    assert config.output == tmp_path / 'cli.pcio'
    assert config.template == tmp_path / 'template.json'


def test_absolute_paths_are_kept(tmp_path: Path) -> None:
    target = tmp_path / 'elsewhere' / 'out.pcio'
    config = BuildConfig.load(tmp_path / 'project', output=target)
    assert config.output == target
