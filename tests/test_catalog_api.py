import pytest

from campusnav.models import LocationPin, Route, RouteWaypoint


def pin_ids(client, map_id):
    return {p["slug"]: p["id"] for p in client.get("/pins", params={"map_id": map_id}).json()}


class TestMapsApi:
    @pytest.mark.api
    def test_create_and_update_map(self, client, auth_headers):
        res = client.post(
            "/maps",
            json={
                "slug": "north-campus",
                "name": "North Campus",
                "base_map_type": "IMAGE_OVERLAY",
                "image_overlay_url": "https://example.com/north.png",
                "image_bounds": {"southWest": {"lat": 1, "lng": 2}, "northEast": {"lat": 3, "lng": 4}},
                "metadata": {"welcomeMessage": "Hi"},
            },
            headers=auth_headers,
        )
        assert res.status_code == 201
        created = res.json()
        assert created["is_active"] is True
        assert created["metadata"] == {"welcomeMessage": "Hi"}

        res = client.patch(
            f"/maps/{created['id']}",
            json={"name": "North Campus Annex", "metadata": None},
            headers=auth_headers,
        )
        assert res.status_code == 200
        assert res.json()["name"] == "North Campus Annex"
        assert res.json()["metadata"] is None
        assert res.json()["base_map_type"] == "IMAGE_OVERLAY"

    @pytest.mark.api
    def test_invalid_map_payloads(self, client, auth_headers):
        assert client.post("/maps", json={"slug": "x", "name": "Short slug"}, headers=auth_headers).status_code == 422
        res = client.post(
            "/maps",
            json={"slug": "bad-url", "name": "Bad URL", "tile_url": "ftp://tiles.example.com"},
            headers=auth_headers,
        )
        assert res.status_code == 422

    @pytest.mark.api
    def test_duplicate_slug(self, client, seeded_headers):
        res = client.post("/maps", json={"slug": "central-campus", "name": "Again"}, headers=seeded_headers)
        assert res.status_code == 400
        assert res.json()["detail"] == "Failed to create map"

    @pytest.mark.api
    def test_list_maps(self, client, campus):
        plain = client.get("/maps").json()
        assert [m["slug"] for m in plain] == ["central-campus"]
        assert "routes" not in plain[0]

        full = client.get("/maps", params={"include": "full"}).json()
        assert len(full[0]["location_pins"]) == 3
        route = full[0]["routes"][0]
        assert route["is_default"] is True
        assert [w["order"] for w in route["waypoints"]] == [1, 2, 3]
        assert route["waypoints"][1]["location"]["name"] == "Innovation Hub"

    @pytest.mark.api
    def test_get_map(self, client, campus):
        res = client.get(f"/maps/{campus.id}")
        assert res.status_code == 200
        assert res.json()["metadata"] == {"welcomeMessage": "Welcome to the Central Innovation Campus!"}
        assert client.get("/maps/9999").status_code == 404

    @pytest.mark.api
    def test_delete_map_removes_dependents(self, client, db, campus, seeded_headers):
        res = client.delete(f"/maps/{campus.id}", headers=seeded_headers)
        assert res.status_code == 200
        assert res.json() == {"ok": True, "deleted": {"routes": 1, "pins": 3}}
        db.expire_all()
        assert db.query(Route).count() == 0
        assert db.query(RouteWaypoint).count() == 0
        assert db.query(LocationPin).count() == 0
        assert client.get(f"/maps/{campus.id}").status_code == 404


class TestPinsApi:
    @pytest.mark.api
    def test_create_pin(self, client, campus, seeded_headers):
        payload = {"map_id": campus.id, "slug": "cafeteria", "name": "Cafeteria", "lat": 37.4215, "lng": -122.0845}
        res = client.post("/pins", json=payload, headers=seeded_headers)
        assert res.status_code == 201
        assert res.json()["name"] == "Cafeteria"
        assert client.get(f"/pins/{res.json()['id']}").json()["lat"] == 37.4215

        payload["map_id"] = 9999
        res = client.post("/pins", json=payload, headers=seeded_headers)
        assert res.status_code == 400

    @pytest.mark.api
    def test_update_pin(self, client, campus, seeded_headers):
        hub = pin_ids(client, campus.id)["innovation-hub"]
        res = client.patch(f"/pins/{hub}", json={"audio_text": "Welcome to the hub."}, headers=seeded_headers)
        assert res.status_code == 200
        assert res.json()["audio_text"] == "Welcome to the hub."
        assert res.json()["name"] == "Innovation Hub"

    @pytest.mark.api
    def test_pin_cannot_change_map(self, client, campus, seeded_headers):
        other = client.post("/maps", json={"slug": "east-campus", "name": "East Campus"}, headers=seeded_headers)
        hub = pin_ids(client, campus.id)["innovation-hub"]
        res = client.patch(f"/pins/{hub}", json={"map_id": other.json()["id"]}, headers=seeded_headers)
        assert res.status_code == 400

    @pytest.mark.api
    def test_delete_waypoint_pin_keeps_route(self, client, campus, seeded_headers):
        hub = pin_ids(client, campus.id)["innovation-hub"]
        res = client.delete(f"/pins/{hub}", headers=seeded_headers)
        assert res.json() == {"ok": True, "deleted_routes": 0}

        route = client.get("/routes", params={"map_id": campus.id}).json()[0]
        assert len(route["waypoints"]) == 3
        assert route["waypoints"][1]["location_id"] is None
        assert route["waypoints"][1]["lat"] == 37.4212

    @pytest.mark.api
    def test_delete_endpoint_pin_removes_route(self, client, campus, seeded_headers):
        library = pin_ids(client, campus.id)["knowledge-library"]
        res = client.delete(f"/pins/{library}", headers=seeded_headers)
        assert res.json() == {"ok": True, "deleted_routes": 1}
        assert client.get("/routes", params={"map_id": campus.id}).json() == []
        assert client.get(f"/pins/{library}").status_code == 404


class TestRoutesApi:
    def route_payload(self, map_id, ids, **extra):
        payload = {
            "map_id": map_id,
            "slug": "hub-to-library",
            "name": "Hub to Library",
            "start_location_id": ids["innovation-hub"],
            "end_location_id": ids["knowledge-library"],
            "estimated_minutes": 4,
            "waypoints": [
                {"order": 2, "lat": 37.4204, "lng": -122.0838, "location_id": ids["knowledge-library"]},
                {"order": 1, "lat": 37.4212, "lng": -122.085, "location_id": ids["innovation-hub"]},
            ],
        }
        payload.update(extra)
        return payload

    @pytest.mark.api
    def test_create_route(self, client, campus, seeded_headers):
        ids = pin_ids(client, campus.id)
        res = client.post("/routes", json=self.route_payload(campus.id, ids), headers=seeded_headers)
        assert res.status_code == 201
        body = res.json()
        assert [w["order"] for w in body["waypoints"]] == [1, 2]
        assert body["end_location"]["name"] == "Knowledge Library"
        assert body["is_default"] is False

    @pytest.mark.api
    def test_duplicate_waypoint_order(self, client, campus, seeded_headers):
        ids = pin_ids(client, campus.id)
        payload = self.route_payload(campus.id, ids)
        payload["waypoints"][0]["order"] = 1
        assert client.post("/routes", json=payload, headers=seeded_headers).status_code == 422

    @pytest.mark.api
    def test_pin_from_other_map_rejected(self, client, campus, seeded_headers):
        ids = pin_ids(client, campus.id)
        other = client.post("/maps", json={"slug": "east-campus", "name": "East Campus"}, headers=seeded_headers)
        res = client.post(
            "/routes", json=self.route_payload(other.json()["id"], ids), headers=seeded_headers
        )
        assert res.status_code == 400
        assert "belongs to another map" in res.json()["detail"]

    @pytest.mark.api
    def test_single_default_per_map(self, client, campus, seeded_headers):
        ids = pin_ids(client, campus.id)
        res = client.post(
            "/routes", json=self.route_payload(campus.id, ids, is_default=True), headers=seeded_headers
        )
        assert res.json()["is_default"] is True
        defaults = [r for r in client.get("/routes", params={"map_id": campus.id}).json() if r["is_default"]]
        assert [r["slug"] for r in defaults] == ["hub-to-library"]

    @pytest.mark.api
    def test_patch_replaces_waypoints(self, client, campus, seeded_headers):
        route = client.get("/routes", params={"map_id": campus.id}).json()[0]
        res = client.patch(
            f"/routes/{route['id']}",
            json={
                "name": "Welcome Center to Library (short)",
                "waypoints": [
                    {"order": 1, "lat": 37.4221, "lng": -122.0841},
                    {"order": 2, "lat": 37.4204, "lng": -122.0838, "instruction": "Straight on."},
                ],
            },
            headers=seeded_headers,
        )
        assert res.status_code == 200
        body = res.json()
        assert body["name"] == "Welcome Center to Library (short)"
        assert len(body["waypoints"]) == 2
        assert body["waypoints"][1]["instruction"] == "Straight on."
        assert body["is_default"] is True

    @pytest.mark.api
    def test_delete_route(self, client, db, campus, seeded_headers):
        route = client.get("/routes", params={"map_id": campus.id}).json()[0]
        assert client.delete(f"/routes/{route['id']}", headers=seeded_headers).json() == {"ok": True}
        assert client.get(f"/routes/{route['id']}").status_code == 404
        db.expire_all()
        assert db.query(RouteWaypoint).count() == 0
        assert db.query(LocationPin).count() == 3
