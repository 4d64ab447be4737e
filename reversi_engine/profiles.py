"""Built-in opponents. Only the fields the search consumes are kept here."""

from typing import Any, Dict, List

BUILTIN_PROFILES: List[Dict[str, Any]] = [
    {
        "id": "attacker",
        "displayName": "Aki the Reckless",
        "logicType": "static",
        "depth": 3,
        "randomness": 0,
        "parameters": {"mobility": 5, "position": 10, "discDiff": 80},
    },
    {
        "id": "defender",
        "displayName": "Mamoru the Wall",
        "logicType": "static",
        "depth": 4,
        "randomness": 0,
        "parameters": {"mobility": 30, "position": 100, "discDiff": 0},
    },
    {
        "id": "hybrid",
        "displayName": "Jekyll the Two-Faced",
        "logicType": "dynamic_turn",
        "depth": 3,
        "randomness": 0,
        "parameters": {
            "switchTurn": 25,
            "early": {"mobility": 20, "position": 80, "discDiff": -10},
            "late": {"mobility": 5, "position": 10, "discDiff": 100},
        },
    },
    {
        "id": "whimsical",
        "displayName": "Whimsical Cat",
        "logicType": "static",
        "depth": 3,
        "randomness": 3,
        "parameters": {"mobility": 10, "position": 50, "discDiff": 10},
    },
]

_BY_ID = {profile["id"]: profile for profile in BUILTIN_PROFILES}


def get_profile(profile_id: str) -> Dict[str, Any]:
    """Return the built-in profile ``profile_id``; KeyError if unknown."""
    return _BY_ID[profile_id]


def profile_ids() -> List[str]:
    return list(_BY_ID)
