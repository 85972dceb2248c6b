"""HTTP-level tests for the leaderboard API."""

from datetime import date

import pytest

from fitscore.core.time import today


def _register(client, name="Alan Turing", **extra):
    response = client.post("/participants", json={"name": name, **extra})
    assert response.status_code == 201, response.text
    return response.json()


def _submit(client, code, station, measurements, **extra):
    return client.post(
        "/station-results",
        json={"participantCode": code, "stationType": station, "measurements": measurements, **extra},
    )


def _threshold(**overrides):
    body = {
        "station_type": "balance",
        "metric_name": "balance_seconds",
        "gender": "male",
        "age_group": "18-39",
        "min_average_value": 15,
        "max_average_value": 24,
    }
    body.update(overrides)
    return body


# =============================================================================
# System
# =============================================================================

def test_health(client):
    assert client.get("/health").json() == {"ok": True}
    assert client.get("/healthz").json() == {"ok": True}


def test_config_exposes_leaderboard_limits(client):
    body = client.get("/config").json()
    assert body["leaderboard"]["default_limit"] == 10
    assert body["leaderboard"]["max_limit"] == 50
    assert "total_score" in body["leaderboard"]["sort_fields"]


def test_stations_in_event_order(client):
    stations = client.get("/stations").json()
    assert [s["station_type"] for s in stations] == ["balance", "breath", "grip", "health"]
    assert all(s["max_score"] == 3 for s in stations)


# =============================================================================
# Participants
# =============================================================================

def test_create_and_fetch_participant(client):
    created = _register(
        client,
        participant_code="p00001",
        gender="M",
        date_of_birth="1990-04-01",
        organization="OrgA",
    )
    assert created["participant_code"] == "P00001"
    assert created["gender"] == "male"
    assert created["organisation"] == "OrgA"
    assert created["date_of_birth"] == "1990-04-01"

    fetched = client.get("/participants/p00001")
    assert fetched.status_code == 200
    assert fetched.json()["id"] == created["id"]


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"name": "   "},
        {"name": "x" * 121},
        {"name": "Ada", "date_of_birth": "01/02/1990"},
        {"name": 5},
        {"name": "Ada", "gender": 1},
        {"name": "Ada", "participant_code": 123},
    ],
)
def test_create_participant_validation(client, body):
    assert client.post("/participants", json=body).status_code == 400


def test_duplicate_participant_code(client):
    _register(client, participant_code="P00001")
    response = client.post("/participants", json={"name": "Ada", "participant_code": "P00001"})
    assert response.status_code == 409
    assert response.json()["error"] == "DUPLICATE_PARTICIPANT"


def test_unknown_participant(client):
    response = client.get("/participants/NOBODY")
    assert response.status_code == 404
    assert response.json()["error"] == "PARTICIPANT_NOT_FOUND"


def test_participant_results_and_progress(client):
    _register(client, participant_code="P00001", gender="male")
    _submit(client, "P00001", "balance", {"balance_seconds": 50})
    _submit(client, "P00001", "breath", {"breath_seconds": 20})
    _submit(client, "P00001", "grip", {"grip_left_kg": 35, "grip_right_kg": 38})

    body = client.get("/participants/P00001/results").json()
    assert body["participantCode"] == "P00001"
    assert {r["station_type"]: r["score"] for r in body["results"]} == {
        "balance": 3,
        "breath": 1,
        "grip": 2,
    }
    assert body["progress"] == {
        "completedStations": 3,
        "totalStations": 4,
        "remainingStations": ["health"],
        "unscoredStations": [],
        "totalScore": 6,
        "maxPossibleScore": 9,
        "grade": "Average",
    }


# =============================================================================
# Station results
# =============================================================================

def test_submit_result(client):
    _register(client, participant_code="P00001")
    response = _submit(client, "p00001", "balance", {"balance_seconds": 50}, recordedBy="op-1")
    assert response.status_code == 201
    body = response.json()
    assert body["ok"] is True
    assert body["participant_code"] == "P00001"
    assert body["result"]["score"] == 3
    assert body["result"]["max_score"] == 3
    assert body["result"]["measurements"] == {"balance_seconds": 50.0}
    assert body["result"]["recorded_by"] == "op-1"


def test_duplicate_submission_conflict(client):
    _register(client, participant_code="P00001")
    first = _submit(client, "P00001", "breath", {"breath_seconds": 62}).json()["result"]

    response = _submit(client, "P00001", "breath", {"breath_seconds": 5})
    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "DUPLICATE_RESULT"
    assert body["existingResultId"] == first["id"]
    assert body["recordedAt"] == first["created_at"]

    results = client.get("/participants/P00001/results").json()["results"]
    assert [r["score"] for r in results] == [3]


def test_delete_then_resubmit(client):
    _register(client, participant_code="P00001")
    first = _submit(client, "P00001", "grip", {"grip_left_kg": 10}).json()["result"]

    deleted = client.delete(f"/station-results/{first['id']}")
    assert deleted.status_code == 200
    assert deleted.json()["deletedResult"]["stationType"] == "grip"
    assert deleted.json()["deletedResult"]["recordedAt"] == first["created_at"]

    second = _submit(client, "P00001", "grip", {"grip_left_kg": 45}).json()["result"]
    assert second["id"] != first["id"]
    assert client.delete(f"/station-results/{first['id']}").status_code == 404


def test_submit_missing_fields(client):
    response = client.post("/station-results", json={"participantCode": "P00001"})
    assert response.status_code == 400


def test_submit_rejects_non_string_fields(client):
    _register(client, participant_code="P00001")
    assert _submit(client, 123, "balance", {"balance_seconds": 10}).status_code == 400
    response = _submit(client, "P00001", "balance", {"balance_seconds": 10}, recordedBy=7)
    assert response.status_code == 400


def test_unscored_health_is_recorded_not_remaining(client):
    _register(client, participant_code="P00001")
    first = _submit(client, "P00001", "health", {})
    assert first.status_code == 201
    assert first.json()["result"]["score"] is None

    progress = client.get("/participants/P00001/results").json()["progress"]
    assert progress["remainingStations"] == ["balance", "breath", "grip"]
    assert progress["unscoredStations"] == ["health"]
    assert progress["grade"] is None

    assert _submit(client, "P00001", "health", {"pulse": 60}).status_code == 409


def test_submit_unknown_station(client):
    _register(client, participant_code="P00001")
    response = _submit(client, "P00001", "sprint", {"seconds": 9})
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_STATION_TYPE"


def test_submit_invalid_measurement(client):
    _register(client, participant_code="P00001")
    response = _submit(client, "P00001", "balance", {"balance_seconds": "long"})
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "INVALID_MEASUREMENT"
    assert body["field"] == "balance_seconds"


def test_submit_unknown_participant(client):
    response = _submit(client, "NOBODY", "balance", {"balance_seconds": 10})
    assert response.status_code == 404


# =============================================================================
# Leaderboard
# =============================================================================

def _seed(client):
    for code, name, org, balance, breath in (
        ("P00001", "Ada", "OrgA", 50, 20),
        ("P00002", "Grace", "OrgB", 50, 65),
        ("P00003", "Alan", "OrgA", 10, 10),
    ):
        _register(client, name, participant_code=code, organisation=org)
        _submit(client, code, "balance", {"balance_seconds": balance})
        _submit(client, code, "breath", {"breath_seconds": breath})
    _register(client, "Idle", participant_code="P00004", organisation="OrgB")


def test_leaderboard_shape_and_ranking(client):
    _seed(client)
    body = client.get("/leaderboard").json()

    assert [(r["participant_code"], r["rank"], r["total_score"]) for r in body["results"]] == [
        ("P00002", 1, 6),
        ("P00001", 2, 4),
        ("P00003", 3, 2),
    ]
    assert body["results"][0]["grade"] == "Above Average"
    assert body["pagination"] == {"total": 3, "limit": 10, "offset": 0, "hasMore": False}
    assert body["filters"]["sort"] == "total_score"
    assert body["stats"] == {
        "totalParticipants": 3,
        "avgScore": 4.0,
        "aboveAverage": 1,
        "topOrganization": "OrgB",
    }


def test_leaderboard_filter_sort_and_paging(client):
    _seed(client)
    body = client.get(
        "/leaderboard",
        params={"org_filter": "orga", "sort": "name", "order": "asc", "limit": 1},
    ).json()
    assert [(r["name"], r["rank"]) for r in body["results"]] == [("Ada", 2)]
    assert body["pagination"] == {"total": 2, "limit": 1, "offset": 0, "hasMore": True}
    assert body["stats"]["totalParticipants"] == 2
    assert body["stats"]["topOrganization"] == "OrgA"


def test_leaderboard_clamps_limit_and_ignores_unknown_sort(client):
    body = client.get("/leaderboard", params={"limit": 500, "sort": "height"}).json()
    assert body["pagination"]["limit"] == 50
    assert body["filters"]["sort"] == "total_score"
    assert body["results"] == []
    assert body["stats"]["topOrganization"] == "None"


def test_thresholds_change_scoring(client):
    assert client.post("/admin/scoring-thresholds", json=_threshold()).status_code == 201
    _register(
        client,
        participant_code="P00001",
        gender="male",
        date_of_birth=date(today().year - 30, 1, 1).isoformat(),
    )
    response = _submit(client, "P00001", "balance", {"balance_seconds": 30})
    assert response.json()["result"]["score"] == 3


# =============================================================================
# Threshold administration
# =============================================================================

def test_threshold_crud(client):
    created = client.post("/admin/scoring-thresholds", json=_threshold(gender="MALE"))
    assert created.status_code == 201
    threshold = created.json()
    assert threshold["gender"] == "male"
    assert threshold["min_average_value"] == 15.0

    listed = client.get("/admin/scoring-thresholds", params={"station_type": "balance"}).json()
    assert [row["id"] for row in listed] == [threshold["id"]]

    updated = client.put(
        f"/admin/scoring-thresholds/{threshold['id']}", json={"max_average_value": 30}
    )
    assert updated.status_code == 200
    assert updated.json()["max_average_value"] == 30.0

    deleted = client.delete(f"/admin/scoring-thresholds/{threshold['id']}")
    assert deleted.status_code == 200
    assert deleted.json()["deletedThreshold"]["id"] == threshold["id"]
    assert client.get("/admin/scoring-thresholds").json() == []


def test_duplicate_threshold(client):
    client.post("/admin/scoring-thresholds", json=_threshold())
    response = client.post("/admin/scoring-thresholds", json=_threshold(min_average_value=1))
    assert response.status_code == 409
    assert response.json()["error"] == "DUPLICATE_THRESHOLD"


@pytest.mark.parametrize(
    "overrides",
    [
        {"station_type": "sprint"},
        {"gender": "other"},
        {"age_group": "10-17"},
        {"min_average_value": "lots"},
        {"min_average_value": 30, "max_average_value": 20},
        {"metric_name": ""},
        {"metric_name": "seconds"},
        {"station_type": "health", "metric_name": "pulse"},
        {"min_average_value": "nan"},
        {"max_average_value": "inf"},
        {"min_average_value": True},
        {"is_active": "no"},
    ],
)
def test_threshold_validation(client, overrides):
    response = client.post("/admin/scoring-thresholds", json=_threshold(**overrides))
    assert response.status_code == 400
    assert client.get("/admin/scoring-thresholds").json() == []


def test_threshold_update_rejects_inverted_band(client):
    threshold = client.post("/admin/scoring-thresholds", json=_threshold()).json()
    url = f"/admin/scoring-thresholds/{threshold['id']}"

    response = client.put(url, json={"min_average_value": 40})
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_THRESHOLD"

    assert client.put(url, json={}).status_code == 400
    assert client.put("/admin/scoring-thresholds/999", json={"min_average_value": 1}).status_code == 404


def test_deactivated_threshold_stops_applying(client):
    threshold = client.post("/admin/scoring-thresholds", json=_threshold()).json()
    assert threshold["is_active"] is True
    updated = client.put(
        f"/admin/scoring-thresholds/{threshold['id']}", json={"is_active": False}
    )
    assert updated.json()["is_active"] is False

    _register(
        client,
        participant_code="P00001",
        gender="male",
        date_of_birth=date(today().year - 30, 1, 1).isoformat(),
    )
    response = _submit(client, "P00001", "balance", {"balance_seconds": 30})
    assert response.json()["result"]["score"] == 2


def test_grip_threshold_accepted(client):
    response = client.post(
        "/admin/scoring-thresholds",
        json=_threshold(station_type="grip", metric_name="grip_kg"),
    )
    assert response.status_code == 201
