from pathlib import Path

import pytest

from alertsmap.config import AppConfig, load_config


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_without_file():
    cfg = load_config(None)
    assert cfg == AppConfig.default()
    assert cfg.render.width == 80
    assert cfg.render.height == 40
    assert cfg.render.simplification == 0.01
    assert cfg.render.area_mode is False
    assert cfg.geo.locale == "uk"
    assert cfg.logging.log_file is None


def test_full_config(tmp_path):
    path = _write(
        tmp_path,
        """
render:
  width: 120
  height: 30
  simplification: 0
  area_mode: true
geo:
  locale: EN
  viewport_padding_deg: 1
logging:
  log_file: logs/map.log
  verbose: true
""",
    )
    cfg = load_config(path)
    assert cfg.source_path == path.resolve()
    assert (cfg.render.width, cfg.render.height) == (120, 30)
    assert cfg.render.simplification == 0.0
    assert cfg.render.area_mode is True
    assert cfg.geo.locale == "en"
    assert cfg.geo.viewport_padding_deg == 1.0
    assert cfg.logging.log_file == tmp_path.resolve() / "logs" / "map.log"
    assert cfg.logging.verbose is True


def test_missing_sections_use_defaults(tmp_path):
    cfg = load_config(_write(tmp_path, "render:\n  width: 60\n"))
    assert cfg.render.width == 60
    assert cfg.render.height == 40
    assert cfg.geo.locale == "uk"


def test_empty_file_uses_defaults(tmp_path):
    assert load_config(_write(tmp_path, "")).render.width == 80


@pytest.mark.parametrize(
    "text, message",
    [
        ("render:\n  width: wide\n", "Expected integer for 'render.width'"),
        ("render:\n  width: true\n", "Expected integer for 'render.width'"),
        ("render:\n  height: 0\n", "render.height must be > 0"),
        ("render:\n  simplification: -1\n", "render.simplification must be >= 0"),
        ("render:\n  area_mode: 1\n", "Expected bool for 'render.area_mode'"),
        ("geo:\n  locale: de\n", "geo.locale"),
        ("geo: [1, 2]\n", "Expected mapping for 'geo'"),
        ("- 1\n- 2\n", "Top-level config must be a YAML mapping"),
    ],
)
def test_invalid_values(tmp_path, text, message):
    with pytest.raises(ValueError, match=message.replace(".", r"\.")):
        load_config(_write(tmp_path, text))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")
