"""
API integration tests.
Uses TestClient to avoid starting a server.
Requires: pip install httpx (for TestClient)
"""
from __future__ import annotations

from pathlib import Path

import pytest

try:
    from fastapi.testclient import TestClient
    HAS_HTTPX = True
except (ImportError, RuntimeError):
    HAS_HTTPX = False

# Ensure project root on path
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

pytestmark = pytest.mark.skipif(not HAS_HTTPX, reason="httpx required for TestClient")

from leaguegen.api import app
from leaguegen.persistence.db import set_db_path, init_db


@pytest.fixture(autouse=True)
def isolated_db(tmp_path):
    """Use a temporary DB for each test."""
    db_path = tmp_path / "test.db"
    set_db_path(db_path)
    init_db(db_path=db_path)
    yield db_path


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def league(client):
    """Nation, a tier-2 league (1 up, 1 down) and four member clubs."""
    nation = client.post("/nations", json={"name": "Testland"}).json()
    league = client.post(
        "/leagues",
        json={"name": "Second Division", "nation_id": nation["id"], "tier": 2,
              "promotion_spots": 1, "relegation_spots": 1},
    ).json()
    club_ids = []
    for i, name in enumerate(["Athletic", "Borough", "City", "Dynamo"]):
        resp = client.post(
            "/clubs",
            json={"name": name, "nation_id": nation["id"], "league_id": league["id"],
                  "stability_points": 10 - i * 3, "league_titles": i % 2},
        )
        assert resp.status_code == 200
        club_ids.append(resp.json()["id"])
    return {"nation": nation, "league": league, "club_ids": club_ids}


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_create_and_list_clubs(client, league):
    resp = client.get("/clubs", params={"league_id": league["league"]["id"]})
    assert resp.status_code == 200
    clubs = resp.json()["clubs"]
    assert [c["name"] for c in clubs] == ["Athletic", "Borough", "City", "Dynamo"]
    assert clubs[0]["stability_status"] == "struggling"


def test_create_club_unknown_nation(client):
    resp = client.post("/clubs", json={"name": "Lost", "nation_id": "nowhere"})
    assert resp.status_code == 404


def test_create_league_rejects_bad_tier(client):
    nation = client.post("/nations", json={"name": "Testland"}).json()
    resp = client.post("/leagues", json={"name": "Bad", "nation_id": nation["id"], "tier": 0})
    assert resp.status_code == 422


def test_update_club(client, league):
    club_id = league["club_ids"][0]
    resp = client.patch(f"/clubs/{club_id}", json={"stability_points": 30, "promotions": 2})
    assert resp.status_code == 200
    data = resp.json()
    assert data["stability_status"] == "thriving"
    assert data["promotions"] == 2
    assert data["name"] == "Athletic"
    assert client.patch("/clubs/missing", json={"promotions": 1}).status_code == 404


def test_generate_preview(client, league):
    lid = league["league"]["id"]
    body = {"year": "1994", "club_ids": league["club_ids"], "seed": 7}
    resp = client.post(f"/leagues/{lid}/seasons/generate", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["seed"] == 7
    assert data["year"] == "1994"
    assert len(data["table"]) == 4
    assert len(data["fixtures"]) == 12
    assert [r["status"] for r in data["table"]] == ["champion", "promoted", "", "relegated"]
    assert all(r["played"] == 6 for r in data["table"])
    # Preview writes nothing
    assert client.get(f"/leagues/{lid}/seasons").json()["seasons"] == []
    # Same seed, same table
    again = client.post(f"/leagues/{lid}/seasons/generate", json=body).json()
    assert again["table"] == data["table"]


def test_generate_without_seed_returns_one(client, league):
    lid = league["league"]["id"]
    resp = client.post(f"/leagues/{lid}/seasons/generate", json={"year": "1994", "club_ids": league["club_ids"]})
    assert resp.status_code == 200
    assert isinstance(resp.json()["seed"], int)


def test_generate_errors(client, league):
    lid = league["league"]["id"]
    too_few = client.post(
        f"/leagues/{lid}/seasons/generate", json={"year": "1994", "club_ids": league["club_ids"][:2]}
    )
    assert too_few.status_code == 400
    unknown_club = client.post(
        f"/leagues/{lid}/seasons/generate",
        json={"year": "1994", "club_ids": league["club_ids"] + ["ghost"]},
    )
    assert unknown_club.status_code == 404
    unknown_league = client.post(
        "/leagues/missing/seasons/generate", json={"year": "1994", "club_ids": league["club_ids"]}
    )
    assert unknown_league.status_code == 404


def test_save_season_and_read_back(client, league):
    lid = league["league"]["id"]
    preview = client.post(
        f"/leagues/{lid}/seasons/generate",
        json={"year": "1994", "club_ids": league["club_ids"], "seed": 21},
    ).json()
    resp = client.post(
        f"/leagues/{lid}/seasons",
        json={"year": "1994", "club_ids": league["club_ids"], "seed": 21, "store_fixtures": True},
    )
    assert resp.status_code == 200
    saved = resp.json()
    assert saved["complete"] is True
    assert saved["rows_written"] == 4
    assert saved["fixtures_written"] == 12
    assert saved["table"] == preview["table"]
    season = saved["season"]
    assert season["champion_name"] == preview["table"][0]["club_name"]
    assert season["seed"] == 21

    seasons = client.get(f"/leagues/{lid}/seasons").json()["seasons"]
    assert [s["id"] for s in seasons] == [season["id"]]

    table = client.get(f"/seasons/{season['id']}/table").json()["table"]
    assert [r["club_id"] for r in table] == [r["club_id"] for r in preview["table"]]
    assert [r["points"] for r in table] == [r["points"] for r in preview["table"]]

    matches = client.get(f"/seasons/{season['id']}/matches").json()["matches"]
    assert len(matches) == 12


def test_save_requires_seed(client, league):
    lid = league["league"]["id"]
    resp = client.post(f"/leagues/{lid}/seasons", json={"year": "1994", "club_ids": league["club_ids"]})
    assert resp.status_code == 422


def test_eligible_clubs_default_selection(client, league):
    lid = league["league"]["id"]
    nation_id = league["nation"]["id"]
    client.post("/clubs", json={"name": "Albion", "nation_id": nation_id})
    client.post("/clubs", json={"name": "Ghosts", "nation_id": nation_id, "is_defunct": True})

    before = client.get(f"/leagues/{lid}/eligible-clubs", params={"year": "1994"}).json()
    assert [c["name"] for c in before["clubs"]] == ["Athletic", "Borough", "City", "Dynamo", "Albion"]
    assert before["selected_count"] == 0

    client.post(f"/leagues/{lid}/seasons", json={"year": "1994", "club_ids": league["club_ids"], "seed": 3})
    after = client.get(f"/leagues/{lid}/eligible-clubs", params={"year": "1995"}).json()
    assert after["selected_count"] == 4
    assert {c["name"]: c["selected"] for c in after["clubs"]} == {
        "Athletic": True, "Borough": True, "City": True, "Dynamo": True, "Albion": False,
    }

    # Omitting club_ids reuses last season's clubs
    resp = client.post(f"/leagues/{lid}/seasons/generate", json={"year": "1995", "seed": 4})
    assert resp.status_code == 200
    assert sorted(r["club_id"] for r in resp.json()["table"]) == sorted(league["club_ids"])


def test_missing_season(client):
    assert client.get("/seasons/missing/table").status_code == 404
    assert client.get("/seasons/missing/matches").status_code == 404
    assert client.get("/leagues/missing/eligible-clubs", params={"year": "1994"}).status_code == 404


def test_update_league_changes_next_generation(client, league):
    lid = league["league"]["id"]
    resp = client.patch(f"/leagues/{lid}", json={"tier": 1, "relegation_spots": 2})
    assert resp.status_code == 200
    assert (resp.json()["tier"], resp.json()["promotion_spots"], resp.json()["relegation_spots"]) == (1, 1, 2)
    data = client.post(
        f"/leagues/{lid}/seasons/generate", json={"year": "1994", "club_ids": league["club_ids"], "seed": 7}
    ).json()
    assert [r["status"] for r in data["table"]] == ["champion", "", "relegated", "relegated"]
    assert client.patch("/leagues/missing", json={"tier": 2}).status_code == 404


def test_save_same_year_twice_conflicts(client, league):
    lid = league["league"]["id"]
    body = {"year": "1994", "club_ids": league["club_ids"], "seed": 1}
    assert client.post(f"/leagues/{lid}/seasons", json=body).status_code == 200
    resp = client.post(f"/leagues/{lid}/seasons", json={**body, "seed": 2})
    assert resp.status_code == 409
    assert len(client.get(f"/leagues/{lid}/seasons").json()["seasons"]) == 1


def test_sync_stats_endpoint(client, league):
    lid = league["league"]["id"]
    saved = client.post(
        f"/leagues/{lid}/seasons", json={"year": "1994", "club_ids": league["club_ids"], "seed": 7}
    ).json()
    resp = client.post("/clubs/sync-stats", json={"club_ids": league["club_ids"]})
    assert resp.status_code == 200
    assert sorted(resp.json()["updated_club_ids"]) == sorted(league["club_ids"])

    promoted_id = saved["table"][1]["club_id"]
    relegated_id = saved["table"][3]["club_id"]
    assert client.get(f"/clubs/{promoted_id}").json()["promotions"] == 1
    assert client.get(f"/clubs/{relegated_id}").json()["relegations"] == 1
    assert client.post("/clubs/sync-stats", json={"club_ids": ["ghost"]}).status_code == 404
