# backend/tests/test_my_puzzles_routes.py

from bson import ObjectId

from .conftest import OTHER_USER_ID


def _create(client, **payload):
    r = client.post("/my/puzzles", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_and_get_detail(client):
    created = _create(
        client,
        puzzle_id="puzzle-1",
        status="library",
        notes="Cadeau d'anniversaire",
        difficulty_rating=3,
    )
    log_id = created["log"]["id"]

    r = client.get(f"/my/puzzles/{log_id}")
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == log_id
    assert body["status"] == "library"
    assert body["notes"] == "Cadeau d'anniversaire"
    assert body["difficulty_rating"] == 3


def test_create_duplicate_conflicts(client):
    _create(client, puzzle_id="puzzle-1")
    r = client.post("/my/puzzles", json={"puzzle_id": "puzzle-1", "status": "library"})

    assert r.status_code == 409
    assert r.json()["error"]["code"] == "PUZZLE_LOG_EXISTS"


def test_create_rejects_bad_rating(client):
    r = client.post("/my/puzzles", json={"puzzle_id": "puzzle-1", "user_rating": 6})
    assert r.status_code == 422


def test_list_with_status_filter_and_metadata(client, store):
    store.puzzles["puzzle-1"] = {"title": "Nuit étoilée", "brand": "Ravensburger", "piece_count": 1000}
    _create(client, puzzle_id="puzzle-1", status="library")
    _create(client, puzzle_id="puzzle-2", status="wishlist")

    r = client.get("/my/puzzles", params={"status": "library"})
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 1
    assert body["nb_pages"] == 1
    [item] = body["items"]
    assert item["puzzle_id"] == "puzzle-1"
    assert item["title"] == "Nuit étoilée"
    assert item["brand"] == "Ravensburger"
    assert item["pieces"] == 1000

    r_all = client.get("/my/puzzles")
    assert r_all.json()["total"] == 2


def test_list_rejects_unknown_status(client):
    r = client.get("/my/puzzles", params={"status": "finished"})
    assert r.status_code == 422


def test_list_pagination(client):
    for i in range(3):
        _create(client, puzzle_id=f"puzzle-{i}", status="library")

    body = client.get("/my/puzzles", params={"page": 2, "page_size": 2}).json()
    assert body["page"] == 2
    assert body["page_size"] == 2
    assert body["nb_pages"] == 2
    assert len(body["items"]) == 1


def test_check_endpoint(client):
    r = client.get("/my/puzzles/check", params={"puzzle_id": "puzzle-1"})
    assert r.json() == {"exists": False, "log": None}

    _create(client, puzzle_id="puzzle-1")
    body = client.get("/my/puzzles/check", params={"puzzle_id": "puzzle-1"}).json()
    assert body["exists"] is True
    assert body["log"]["puzzle_id"] == "puzzle-1"


def test_patch_notes_only(client):
    log_id = _create(client, puzzle_id="puzzle-1", status="library")["log"]["id"]

    r = client.patch(f"/my/puzzles/{log_id}", json={"notes": "Première note"})

    assert r.status_code == 200
    body = r.json()
    assert body["log"]["notes"] == "Première note"
    assert body["log"]["status"] == "library"
    assert body["feed_item"] is None


def test_patch_photos_publishes_feed_item(client):
    log_id = _create(client, puzzle_id="puzzle-1", status="in-progress", progress_percentage=20)["log"]["id"]

    r = client.patch(f"/my/puzzles/{log_id}", json={"photos": ["coins.jpg"]})

    assert r.status_code == 200
    body = r.json()
    assert body["log"]["photos"] == ["coins.jpg"]
    assert body["feed_item"]["type"] == "puzzle_log"
    assert body["feed_item"]["media_urls"] == ["coins.jpg"]


def test_patch_completion_with_duration(client):
    log_id = _create(client, puzzle_id="puzzle-1", status="in-progress", progress_percentage=60)["log"]["id"]

    r = client.patch(f"/my/puzzles/{log_id}", json={"status": "completed", "completion_time": "45"})

    body = r.json()
    assert body["log"]["progress_percentage"] == 100
    assert body["log"]["time_spent_seconds"] == 2700
    assert body["feed_item"]["type"] == "solved"


def test_unknown_or_foreign_log_is_not_found(client, store):
    r = client.get(f"/my/puzzles/{ObjectId()}")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "PUZZLE_LOG_NOT_FOUND"

    log_id = _create(client, puzzle_id="puzzle-1")["log"]["id"]
    r = client.get(f"/my/puzzles/{log_id}", headers={"X-User-Id": OTHER_USER_ID})
    assert r.status_code == 404

    r = client.patch(f"/my/puzzles/{log_id}", json={"notes": "x"}, headers={"X-User-Id": OTHER_USER_ID})
    assert r.status_code == 404


def test_stats(client, store):
    store.puzzles["puzzle-1"] = {"title": "Phare", "brand": "Clementoni", "piece_count": 1020}
    client.patch(
        "/puzzle-status",
        json={"puzzle_id": "puzzle-1", "new_status": "completed", "time_spent_seconds": 3600},
    )
    _create(client, puzzle_id="puzzle-2", status="wishlist")

    r = client.get("/my/puzzles/stats")

    assert r.status_code == 200
    stats = r.json()
    assert stats["total_completed"] == 1
    assert stats["total_time_spent"] == 3600
    assert stats["average_time_per_puzzle"] == 3600
    assert stats["this_month_completed"] == 1
    assert stats["favorite_brand"] == "Clementoni"
    assert stats["weekly_streak"] == 1
    assert stats["total_puzzles"] == 2
    assert stats["total_owned"] == 1
    [best_1000] = [b for b in stats["best_times"] if b["bracket"] == 1000]
    assert best_1000 == {"bracket": 1000, "seconds": 3600, "display": "1h"}


def test_patch_null_private_is_ignored(client):
    log_id = _create(client, puzzle_id="puzzle-1", private=True)["log"]["id"]

    r = client.patch(f"/my/puzzles/{log_id}", json={"private": None})

    assert r.status_code == 200
    assert r.json()["log"]["private"] is True


def test_patch_blank_status_is_rejected(client):
    log_id = _create(client, puzzle_id="puzzle-1", status="library")["log"]["id"]

    r = client.patch(f"/my/puzzles/{log_id}", json={"status": ""})

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"
