import json
from types import SimpleNamespace

import pytest

from campusnav.api.deps import get_intent_extractor
from campusnav.main import app
from campusnav.schemas.bridge import encode_gps_update
from campusnav.services.assistant import IntentExtractor

HUB = (37.4212, -122.085)
LIBRARY = (37.4204, -122.0838)


class TestPlanApi:
    @pytest.mark.api
    @pytest.mark.navigation
    def test_plan_default_route(self, client, campus):
        res = client.get("/navigation/plan", params={"user": "Likith"})
        assert res.status_code == 200
        body = res.json()
        assert body["user"] == "Likith"
        assert body["map"]["slug"] == "central-campus"
        assert body["route"]["slug"] == "welcome-to-library"
        assert body["steps"][-1] == "Arrive at Knowledge Library."
        assert body["summary"].startswith("Starting guidance from Welcome Center to Knowledge Library.")
        assert 200 < body["length_m"] < 300
        assert body["polyline"]["geometry"]["type"] == "LineString"
        assert body["campus_bounds"]["center"] == pytest.approx([37.42125, -122.0844])
        assert body["image_bounds"] is None

    @pytest.mark.api
    @pytest.mark.navigation
    def test_plan_campus_tour(self, client, campus):
        body = client.get(
            "/navigation/plan", params={"map_id": campus.id, "destination": "campus tour"}
        ).json()
        assert body["route"]["id"] == "virtual-campus-tour"
        assert len(body["route"]["waypoints"]) == 4
        assert body["steps"][-1] == "Arrive at Welcome Center."

    @pytest.mark.api
    @pytest.mark.navigation
    def test_unknown_map_falls_back_to_first(self, client, campus):
        body = client.get("/navigation/plan", params={"map_id": 9999}).json()
        assert body["map"]["id"] == campus.id

    @pytest.mark.api
    @pytest.mark.navigation
    def test_plan_without_maps(self, client):
        assert client.get("/navigation/plan").status_code == 404


class TestProgressApi:
    @pytest.mark.api
    @pytest.mark.navigation
    def test_waypoint_announcement(self, client, campus):
        res = client.post(
            "/navigation/progress",
            json={"map_id": campus.id, "position": {"lat": HUB[0], "lng": HUB[1], "accuracy": 4}},
        )
        assert res.status_code == 200
        body = res.json()
        assert body["status"] == "Live guidance"
        assert body["within_campus"] is True
        assert body["announcement"].startswith("The Innovation Hub")
        assert body["arrival_pin"]["name"] == "Innovation Hub"

        again = client.post(
            "/navigation/progress",
            json={
                "map_id": campus.id,
                "position": {"lat": HUB[0], "lng": HUB[1]},
                "announced": [body["waypoint_key"]],
            },
        ).json()
        assert again["announcement"] is None

    @pytest.mark.api
    @pytest.mark.navigation
    def test_arrival_from_bridge_message(self, client, campus):
        raw = encode_gps_update(LIBRARY[0], LIBRARY[1], 6.0, 1700000000000)
        body = client.post("/navigation/progress", json={"bridge_message": raw}).json()
        assert body["position"]["lat"] == LIBRARY[0]
        assert body["announcement"] == "You have arrived at Knowledge Library."
        assert body["arrival_pin"]["name"] == "Knowledge Library"

    @pytest.mark.api
    @pytest.mark.navigation
    def test_off_campus(self, client, campus):
        body = client.post(
            "/navigation/progress",
            json={"position": {"lat": 37.5, "lng": -122.0844}, "viewport": "user"},
        ).json()
        assert body["status"] == "Off campus"
        assert body["within_campus"] is False
        assert body["distance_from_campus_km"] == pytest.approx(8.76, abs=0.1)
        assert body["fit_bounds"][0][0] == 37.5

    @pytest.mark.api
    @pytest.mark.navigation
    def test_awaiting_gps(self, client, campus):
        body = client.post(
            "/navigation/progress", json={"bridge_message": json.dumps({"type": "PING"})}
        ).json()
        assert body["status"] == "Awaiting GPS"
        assert body["position"] is None
        assert body["fit_bounds"] is not None

    @pytest.mark.api
    @pytest.mark.navigation
    def test_position_source_required(self, client, campus):
        assert client.post("/navigation/progress", json={"map_id": campus.id}).status_code == 422


class TestAssistantApi:
    @pytest.mark.api
    @pytest.mark.voice
    def test_step_through_greeting(self, client):
        res = client.post("/assistant/step", json={"event": {"type": "start"}})
        assert res.status_code == 200
        turn = res.json()
        assert turn["state"] == "GREETING"
        assert "What's your name?" in turn["speak"]

        turn = client.post("/assistant/step", json={"turn": turn, "event": {"type": "speech_end"}}).json()
        assert turn["state"] == "LISTENING_NAME"
        assert turn["listen"] is True

        turn = client.post(
            "/assistant/step", json={"turn": turn, "event": {"type": "transcript", "text": "I'm Ada"}}
        ).json()
        assert turn["user_name"] == "Ada"

    @pytest.mark.api
    @pytest.mark.voice
    def test_step_rejects_unknown_event(self, client):
        assert client.post("/assistant/step", json={"event": {"type": "dance"}}).status_code == 422

    @pytest.mark.api
    @pytest.mark.voice
    def test_extract(self, client):
        res = client.post("/assistant/extract", json={"text": "Take me to the cafeteria", "context": "DESTINATION"})
        assert res.json() == {"context": "DESTINATION", "value": "Cafeteria", "intent": None, "source": "rules"}

        res = client.post("/assistant/extract", json={"text": "take me to the library"})
        assert res.json()["intent"] == "navigate"

    @pytest.mark.api
    @pytest.mark.voice
    def test_extract_with_list_entity_from_model(self, client):
        reply = SimpleNamespace(text='{"intent": "navigate", "entity": ["Library", "Gym"]}')
        fake = SimpleNamespace(models=SimpleNamespace(generate_content=lambda model, contents: reply))
        app.dependency_overrides[get_intent_extractor] = lambda: IntentExtractor(client=fake)
        res = client.post("/assistant/extract", json={"text": "library or gym", "context": "GENERAL"})
        assert res.status_code == 200
        assert res.json() == {"context": "GENERAL", "value": None, "intent": "navigate", "source": "model"}

    @pytest.mark.api
    @pytest.mark.voice
    def test_extract_requires_text(self, client):
        assert client.post("/assistant/extract", json={"text": "  ", "context": "NAME"}).status_code == 400
