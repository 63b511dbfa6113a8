import pytest

from alertsmap.directory import GeoDirectory
from alertsmap.statuses import AlertStatus, decode_oblast_statuses, default_status_string


@pytest.fixture(scope="module")
def regions():
    return GeoDirectory.from_assets().regions


def test_status_characters():
    assert AlertStatus.from_char("A") is AlertStatus.ACTIVE
    assert AlertStatus.from_char("P") is AlertStatus.PARTLY_ACTIVE
    assert AlertStatus.from_char("L") is AlertStatus.LOADING
    assert AlertStatus.from_char("N") is AlertStatus.NO_ALERT
    assert AlertStatus.from_char("x") is AlertStatus.NO_ALERT


def test_every_status_has_icon_and_color():
    for status in AlertStatus:
        assert status.icon
        assert status.color
    assert AlertStatus.ACTIVE.color == "red"


def test_positions_follow_canonical_order(regions):
    data = "A" + "N" * 8 + "A" + "N" * 17
    statuses = decode_oblast_statuses(data, regions)
    assert len(statuses) == 27
    active = [status.region.name_en for status in statuses if status.is_active]
    assert active == ["Autonomous Republic of Crimea", "Kyiv"]
    assert statuses[9].location_uid == 31


def test_partial_alerts_collapse_at_oblast_level(regions):
    data = "P" * 27
    assert all(s.status is AlertStatus.NO_ALERT for s in decode_oblast_statuses(data, regions))
    detailed = decode_oblast_statuses(data, regions, oblast_level_only=False)
    assert all(s.is_partly_active for s in detailed)


def test_quoted_feed_payload_is_accepted(regions):
    statuses = decode_oblast_statuses(' "' + "L" * 27 + '"\n', regions)
    assert {s.status for s in statuses} == {AlertStatus.LOADING}


def test_length_mismatch_is_rejected(regions):
    with pytest.raises(ValueError, match="26 characters"):
        decode_oblast_statuses("N" * 26, regions)


def test_label_uses_locale(regions):
    (first,) = decode_oblast_statuses("A", regions[:1])
    assert first.label("en") == f"{AlertStatus.ACTIVE.icon} Autonomous Republic of Crimea"
    assert first.label() == f"{AlertStatus.ACTIVE.icon} Автономна Республіка Крим"


def test_default_status_string():
    assert default_status_string(3) == "NNN"
