"""Shared test fixtures."""

import copy
from typing import Any

import pytest

from navgen.core.flatten import FlatTree, flatten
from navgen.core.normalize import normalize
from navgen.core.tree import Screen, Tree

APP_TREE: dict[str, Any] = {
    "config": {"path": "src/screens"},
    "groups": [
        {
            "_tag": "Group",
            "name": "Shared",
            "children": [{"_tag": "Screen", "name": "Detail"}],
        },
    ],
    "navigators": [
        {
            "_tag": "Navigator",
            "name": "App",
            "root": True,
            "export": True,
            "children": [
                {
                    "_tag": "Navigator",
                    "name": "Home",
                    "props": {"initialRouteName": "Feed"},
                    "children": [
                        {"_tag": "Screen", "name": "Feed"},
                        {
                            "_tag": "Screen",
                            "name": "Post",
                            "params": {"id": "abc", "page": 1},
                        },
                        {
                            "_tag": "Group",
                            "name": "Shared",
                            "children": [{"_tag": "Screen", "name": "Detail"}],
                        },
                        {
                            "_tag": "Group",
                            "name": "Custom",
                            "children": [{"_tag": "Screen", "name": "Detail"}],
                        },
                    ],
                },
                {
                    "_tag": "Navigator",
                    "name": "Profile",
                    "path": "./external",
                    "children": [],
                },
                {"_tag": "Screen", "name": "Login", "lazy": False},
            ],
        },
    ],
}

MINIMAL_TREE: dict[str, Any] = {
    "config": {"path": "screens"},
    "navigators": [
        {
            "_tag": "Navigator",
            "name": "App",
            "root": True,
            "children": [
                {
                    "_tag": "Screen",
                    "name": "Search",
                    "params": {"query": "shoes", "limit": 10},
                },
            ],
        },
    ],
}


@pytest.fixture
def app_raw() -> dict[str, Any]:
    """Raw tree with a root navigator, a nested navigator, reference and
    inline groups, an external navigator and an eager screen."""
    return copy.deepcopy(APP_TREE)


@pytest.fixture
def app_tree(app_raw: dict[str, Any]) -> Tree:
    return normalize(app_raw)


@pytest.fixture
def app_flat(app_tree: Tree) -> FlatTree:
    return flatten(app_tree)


@pytest.fixture
def minimal_raw() -> dict[str, Any]:
    """One root navigator with one screen taking a string and a number param."""
    return copy.deepcopy(MINIMAL_TREE)


def find_screen(flat: FlatTree, name: str, parent: str) -> Screen:
    """Look up a flattened screen by its name and its parent's name."""
    for screen in flat.screens:
        if screen.name == name and screen.parent.name == parent:
            return screen
    raise LookupError(f"No screen {name} under {parent}")
