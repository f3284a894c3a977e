#!/usr/bin/env python3
"""Tests for the HTTP routes and the WebSocket command channel."""

import json
import os
import tempfile
import unittest

_DATA_DIR = tempfile.mkdtemp(prefix="snake-arcade-test-")
os.environ["SNAKE_ARCADE_DATA"] = os.path.join(_DATA_DIR, "profile.json")

from fastapi.testclient import TestClient  # noqa: E402

from snake_arcade import main  # noqa: E402


def receive_until(ws, predicate, limit=50):
    """Skip broadcast frames until one matches."""
    for _ in range(limit):
        msg = json.loads(ws.receive_text())
        if predicate(msg):
            return msg
    raise AssertionError("expected message never arrived")


def is_error(msg):
    return msg["type"] == "error"


class TestRoutes(unittest.TestCase):

    def test_catalog(self):
        with TestClient(main.app) as client:
            data = client.get("/").json()
        modes = {m["id"]: m for m in data["modes"]}
        self.assertEqual(len(modes), 7)
        self.assertTrue(modes["classic"]["unlocked"])
        self.assertFalse(modes["uncompromising"]["unlocked"])
        self.assertEqual(modes["uncompromising"]["victory_score"], 10000)
        self.assertEqual(len(data["patterns"]), 11)
        self.assertEqual(data["colors"]["green"], "#10b981")

    def test_state(self):
        with TestClient(main.app) as client:
            data = client.get("/state").json()
        self.assertEqual(data["type"], "state")
        self.assertIn("game", data)
        self.assertEqual(data["profile"]["unlocked_modes"][0], "classic")


class TestWebSocket(unittest.TestCase):

    def test_welcome_then_state(self):
        with TestClient(main.app) as client:
            with client.websocket_connect("/ws") as ws:
                welcome = json.loads(ws.receive_text())
                self.assertEqual(welcome["type"], "welcome")
                self.assertEqual(len(welcome["modes"]), 7)
                state = json.loads(ws.receive_text())
                self.assertEqual(state["type"], "state")

    def test_start_input_quit(self):
        with TestClient(main.app) as client:
            with client.websocket_connect("/ws") as ws:
                ws.send_text(json.dumps({"type": "start", "mode": "classic"}))
                msg = receive_until(ws, lambda m: m["type"] == "state"
                                    and m["game"]["phase"] == "playing")
                self.assertEqual(msg["game"]["status"], "idle")
                self.assertEqual(msg["game"]["snake"], [[10, 10]])

                ws.send_text(json.dumps({"type": "input", "direction": "up"}))
                msg = receive_until(ws, lambda m: m["type"] == "state"
                                    and m["game"]["status"] != "idle")
                self.assertEqual(msg["game"]["direction"], "up")

                ws.send_text(json.dumps({"type": "quit"}))
                msg = receive_until(ws, lambda m: m["type"] == "state"
                                    and m["game"]["phase"] == "menu")
                self.assertEqual(msg["game"]["phase"], "menu")

    def test_rejected_commands(self):
        with TestClient(main.app) as client:
            with client.websocket_connect("/ws") as ws:
                ws.send_text(json.dumps({"type": "start", "mode": "uncompromising"}))
                self.assertIn("locked", receive_until(ws, is_error)["message"])

                ws.send_text("{nope")
                self.assertEqual(receive_until(ws, is_error)["message"], "malformed JSON")

                ws.send_text(json.dumps({"type": "teleport"}))
                self.assertIn("unknown message type", receive_until(ws, is_error)["message"])

                ws.send_text(json.dumps(["start"]))
                self.assertIn("JSON object", receive_until(ws, is_error)["message"])

    def test_customize_round_trip(self):
        with TestClient(main.app) as client:
            with client.websocket_connect("/ws") as ws:
                ws.send_text(json.dumps({"type": "quit"}))
                ws.send_text(json.dumps({"type": "customize"}))
                receive_until(ws, lambda m: m["type"] == "state"
                              and m["game"]["phase"] == "customize")
                ws.send_text(json.dumps({"type": "color", "color": "red"}))
                ws.send_text(json.dumps({"type": "cancel_customization"}))
                msg = receive_until(ws, lambda m: m["type"] == "state"
                                    and m["game"]["phase"] == "menu")
                self.assertNotEqual(msg["profile"]["color"], "red")


if __name__ == "__main__":
    unittest.main()
