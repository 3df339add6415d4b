from __future__ import annotations

import copy
from typing import Any, Dict

import pytest

TODO_APP: Dict[str, Any] = {
    "name": "Todo App",
    "version": "1.0.0",
    "targets": ["ios"],
    "theme": {"name": "Default", "colors": {"primary": "#6366F1"}},
    "screens": [
        {
            "id": "home",
            "name": "Home",
            "root": {"id": "card", "capsuleId": "card", "props": {"title": "Tasks"}, "children": []},
        }
    ],
}


@pytest.fixture
def todo_app() -> Dict[str, Any]:
    return copy.deepcopy(TODO_APP)


@pytest.fixture
def two_screen_app() -> Dict[str, Any]:
    return {
        "name": "Fitness Tracker",
        "version": "0.2.0",
        "targets": ["ios", "android", "web", "desktop"],
        "theme": {"colors": {"primary": "#10B981", "text": {"primary": "#111827"}}},
        "navigation": {"type": "tabs", "initialScreen": "stats"},
        "platformConfig": {"android": {"packageName": "com.example.fit"}},
        "screens": [
            {
                "id": "home",
                "name": "Home",
                "root": {
                    "id": "home-card",
                    "capsuleId": "card",
                    "props": {"title": "Today"},
                    "children": [
                        {"id": "steps", "capsuleId": "progress", "props": {"value": 75}},
                        {"id": "start", "capsuleId": "button", "props": {"text": "Start"}},
                    ],
                },
            },
            {
                "id": "stats",
                "name": "Stats",
                "root": {"id": "weekly", "capsuleId": "chart", "props": {"data": [3, 6, 9]}},
            },
        ],
    }
