import pytest

from alertsmap import cli


def _glyph_lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if line]


def test_render_country_outline(capsys):
    assert cli.main(["render", "--width", "40", "--height", "12"]) == 0
    lines = _glyph_lines(capsys.readouterr().out)
    assert len(lines) == 12
    assert all(len(line) == 40 for line in lines)
    assert any(ch != "⠀" for line in lines for ch in line)


def test_render_regions_in_area_mode(capsys):
    args = ["render", "--region", "Київ", "--region", "11", "--area", "--simplification", "0"]
    assert cli.main(args + ["--width", "20", "--height", "8"]) == 0
    lines = _glyph_lines(capsys.readouterr().out)
    assert len(lines) == 8


def test_render_unknown_region_fails():
    assert cli.main(["render", "--region", "Атлантида"]) == 1


def test_regions_listing(capsys):
    assert cli.main(["regions"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 27
    assert lines[0].endswith("Автономна Республіка Крим")
    assert "uid=31" in lines[9]


def test_bounds(capsys):
    assert cli.main(["bounds"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "x: [21.5800, 40.6300]",
        "y: [43.7300, 52.7500]",
    ]


def test_bounds_of_region(capsys):
    assert cli.main(["bounds", "--region", "Kyiv Oblast"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "x: [28.8000, 32.6000]",
        "y: [48.8000, 51.9000]",
    ]


def test_statuses(capsys):
    assert cli.main(["statuses", "A" + "N" * 26]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 27
    assert lines[0].endswith("Автономна Республіка Крим")


def test_statuses_wrong_length():
    assert cli.main(["statuses", "AN"]) == 1


def test_config_drives_locale(tmp_path, capsys):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("geo:\n  locale: en\n", encoding="utf-8")
    assert cli.main(["regions", "--config", str(cfg)]) == 0
    assert capsys.readouterr().out.splitlines()[0].endswith("Autonomous Republic of Crimea")


def test_missing_config_is_an_error(tmp_path):
    assert cli.main(["regions", "--config", str(tmp_path / "missing.yaml")]) == 1


def test_usage_error_exits_with_2():
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["render", "--width", "wide"])
    assert excinfo.value.code == 2


def test_bounds_use_configured_padding(tmp_path, capsys):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("geo:\n  viewport_padding_deg: 0\n", encoding="utf-8")
    assert cli.main(["bounds", "--region", "Київ", "--config", str(cfg)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "x: [30.2361, 30.8187]",
        "y: [50.2261, 50.5908]",
    ]


def test_bounds_go_through_directory_viewport(monkeypatch, capsys):
    calls = []
    directory = cli.default_directory()
    original = type(directory).get_viewport_bounds

    def recording(self, geometry=None, padding=0.5):
        calls.append((geometry, padding))
        return original(self, geometry, padding)

    monkeypatch.setattr(type(directory), "get_viewport_bounds", recording)
    assert cli.main(["bounds"]) == 0
    assert calls == [(None, 0.5)]
