import pytest

from locc import cli
from locc.config.settings import get_settings
from locc.core.geo import Point, bbox, distance
from locc.formatting import format_bbox
from locc.geocoding.nominatim import LocationFound, NotFound, PlaceFound, TransportError

STUTTGART = Point(lon=9.177789688110352, lat=48.776781529534965)


class StubNominatimClient:
    search_result = LocationFound(point=STUTTGART, display_name="Stuttgart")
    reverse_result = PlaceFound(display_name="Schlossplatz, Stuttgart")

    def __init__(self, settings):
        self.settings = settings

    def search(self, place_name: str):
        return self.search_result

    def reverse(self, point: Point):
        return self.reverse_result


@pytest.fixture
def stub_client(monkeypatch):
    monkeypatch.setattr(cli, "NominatimClient", StubNominatimClient)
    return StubNominatimClient


def test_loc_prints_lon_lat(stub_client, capsys):
    assert cli.main(["loc", "-P", "Stuttgart"]) == 0
    assert capsys.readouterr().out == f"{STUTTGART.lon},{STUTTGART.lat}\n"


def test_loc_not_found_exits_non_zero(stub_client, monkeypatch, capsys):
    monkeypatch.setattr(stub_client, "search_result", NotFound("Atlantis"))

    assert cli.main(["loc", "--place", "Atlantis"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "No result found for 'Atlantis'" in captured.err


def test_rev_prints_display_name(stub_client, capsys):
    assert cli.main(["rev", "-L", "9.1794,48.7784"]) == 0
    assert capsys.readouterr().out == "Schlossplatz, Stuttgart\n"


def test_rev_transport_error(stub_client, monkeypatch, capsys):
    monkeypatch.setattr(stub_client, "reverse_result", TransportError("Reverse request failed: timed out"))

    assert cli.main(["rev", "-L", "9.1794,48.7784"]) == 1
    assert "timed out" in capsys.readouterr().err


def test_dis_prints_whole_metres(capsys):
    assert cli.main(["dis", "-L", "0,0", "-L", "1,0"]) == 0
    expected = round(distance(Point(lon=0.0, lat=0.0), Point(lon=1.0, lat=0.0)) * 1000)
    assert capsys.readouterr().out == f"{expected}\n"


def test_dis_needs_two_locations(capsys):
    assert cli.main(["dis", "-L", "0,0"]) == 1
    assert "exactly two" in capsys.readouterr().err


def test_rnd_with_location_and_seed_is_reproducible(capsys):
    assert cli.main(["rnd", "-L", "9.17,48.77", "-R", "5", "--seed", "3"]) == 0
    first = capsys.readouterr().out
    assert cli.main(["rnd", "-L", "9.17,48.77", "-R", "5", "--seed", "3"]) == 0
    assert capsys.readouterr().out == first

    lon, lat = (float(v) for v in first.strip().split(","))
    assert distance(Point(lon=9.17, lat=48.77), Point(lon=lon, lat=lat)) <= 5 + 1e-9


def test_rnd_with_place_uses_geocoder(stub_client, capsys):
    assert cli.main(["rnd", "-P", "Stuttgart", "-R", "0"]) == 0
    lon, lat = (float(v) for v in capsys.readouterr().out.strip().split(","))
    assert lon == pytest.approx(STUTTGART.lon, abs=1e-9)
    assert lat == pytest.approx(STUTTGART.lat, abs=1e-9)


def test_bbox_prints_query_string(stub_client, capsys):
    assert cli.main(["bbox", "-P", "Stuttgart", "--length", "10"]) == 0
    sw, ne = bbox(STUTTGART, 10.0)
    assert capsys.readouterr().out == format_bbox(sw, ne) + "\n"


def test_dst_projects_from_location(capsys):
    assert cli.main(["dst", "-L", "0,0", "-B", "90", "-D", "0"]) == 0
    assert capsys.readouterr().out == "0.0,0.0\n"


@pytest.mark.parametrize(
    "argv",
    [
        ["rnd", "-L", "9.17,48.77", "-R", "-1"],
        ["rnd", "-L", "9.17,48.77", "-R", "nan"],
        ["rnd", "-L", "9.17", "-R", "1"],
        ["rnd", "-L", "9.17,95", "-R", "1"],
        ["rnd", "-L", "a,b", "-R", "1"],
        ["rnd", "-P", "x", "-L", "1,2", "-R", "1"],
        ["bbox", "-L", "1,2"],
        ["dst", "-L", "1,2", "-B", "nan", "-D", "1"],
        ["dst", "-L", "1,2", "-B", "inf", "-D", "1"],
        ["loc"],
    ],
)
def test_invalid_arguments_are_usage_errors(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    assert excinfo.value.code == 2
    assert capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])
    assert excinfo.value.code == 0
    assert "locc" in capsys.readouterr().out


def test_negative_longitude_with_equals_form(capsys):
    argv = ["dis", "--location=-74.0060,40.7128", "--location=-0.1278,51.5074"]
    assert cli.main(argv) == 0
    metres = int(capsys.readouterr().out)
    assert 5_550_000 < metres < 5_600_000


def test_dst_prints_in_range_longitude_verbatim(capsys):
    assert cli.main(["dst", "-L", "9.1,48.7", "-B", "0", "-D", "0"]) == 0
    assert capsys.readouterr().out == "9.1,48.7\n"


def test_dst_wraps_longitude_past_the_antimeridian(capsys):
    assert cli.main(["dst", "-L", "179.9,0", "-B", "90", "-D", "100"]) == 0
    lon = float(capsys.readouterr().out.split(",")[0])
    assert -180.0 <= lon < -179.0


def test_bad_config_path_is_reported_not_raised(monkeypatch, tmp_path, capsys):
    monkeypatch.setenv("LOCC_CONFIG_PATH", str(tmp_path / "missing.yaml"))
    get_settings.cache_clear()
    try:
        assert cli.main(["dis", "-L", "0,0", "-L", "1,0"]) == 1
    finally:
        monkeypatch.delenv("LOCC_CONFIG_PATH")
        get_settings.cache_clear()
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "invalid configuration" in captured.err


def test_bad_log_level_is_reported_not_raised(capsys):
    assert cli.main(["--log-level", "LOUD", "dis", "-L", "0,0", "-L", "1,0"]) == 1
    assert "invalid configuration" in capsys.readouterr().err
