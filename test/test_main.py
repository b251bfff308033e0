import pytest

import config
import main
from floodguard.routing import plan_routes
from floodguard.weather import fallback_weather_data


@pytest.fixture
def offline(monkeypatch, center, make_risk):
    monkeypatch.setattr(main, "compute_weather_summary", lambda loc: fallback_weather_data())
    monkeypatch.setattr(main, "compute_flood_risk", lambda loc, wx: make_risk())
    monkeypatch.setattr(main, "rank_evacuation_centers", lambda loc, rng=None: [center])
    monkeypatch.setattr(main, "plan_routes",
                        lambda loc, c, r: plan_routes(loc, c, r, route_lookup=lambda o, d, waypoints=(): None))
    monkeypatch.setattr(config, "OUTPUT_DIR", "unused")


def test_parse_args_defaults():
    args = main.parse_args([])
    assert args.lat == config.DEFAULT_LAT
    assert args.center_index == 0
    assert not args.map


def test_pipeline(offline):
    report = main.run_pipeline(["--lat", "12.9", "--lon", "79.1", "--name", "Test Town", "--seed", "1"])
    assert report["location"]["name"] == "Test Town"
    assert report["route"]["center"]["name"] == "Hill School"
    assert report["route"]["directions"][0] == "Head towards Hill School"


def test_skip_route(offline):
    report = main.run_pipeline(["--skip-route"])
    assert report["centers"] == []
    assert report["route"] is None
    assert "No evacuation centers found" not in report["summary_text"]


def test_nothing_ranked_is_reported(offline, monkeypatch):
    monkeypatch.setattr(main, "rank_evacuation_centers", lambda loc, rng=None: [])
    report = main.run_pipeline([])
    assert report["route"] is None
    assert "No evacuation centers found near this location" in report["summary_text"]


def test_console_entry_point_exits_cleanly(offline):
    # console scripts call sys.exit(main())
    with pytest.raises(SystemExit) as exc:
        raise SystemExit(main.main(["--skip-route"]))
    assert exc.value.code is None


def test_outputs_written(offline, tmp_path, monkeypatch):
    monkeypatch.setattr(config, "OUTPUT_DIR", str(tmp_path))
    main.run_pipeline(["--map", "--report", "--seed", "2"])
    assert (tmp_path / config.EVAC_MAP_HTML).exists()
    assert (tmp_path / config.REPORT_JSON).exists()
