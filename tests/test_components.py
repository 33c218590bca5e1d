"""Tests for the component emitter."""

from typing import Any

from navgen.codegen import ts
from navgen.core.flatten import FlatTree, flatten
from navgen.core.normalize import normalize
from navgen.emit.components import build_navigation_module, collect_imports


def _render(flat: FlatTree) -> str:
    return ts.Module(build_navigation_module(flat)).render()


class TestImports:
    """Tests for import collection."""

    def test__required_imports__first(self, app_flat: FlatTree) -> None:
        declarations = build_navigation_module(app_flat)

        assert declarations[0] == ts.ImportDeclaration("react", namespace="React")
        assert declarations[1] == ts.ImportDeclaration("./routes.gen", namespace="route")

    def test__merged_per_module(self, app_flat: FlatTree) -> None:
        imports = [declaration.render() for declaration in collect_imports(app_flat)]

        assert imports == [
            'import { createNativeStackNavigator } from "@react-navigation/native-stack";',
            'import { ProfileNavigator } from "./external";',
            'import { Login } from "src/screens/Login";',
        ]

    def test__expression_use__imported_and_deduplicated(self) -> None:
        header = {"_tag": "Expression", "value": "Header", "use": ["Header", "./Header"]}
        raw = {
            "config": {"path": "src"},
            "navigators": [
                {
                    "_tag": "Navigator",
                    "name": "App",
                    "type": "bottom-tab",
                    "props": {"screenOptions": {"header": header}},
                    "children": [
                        {"_tag": "Screen", "name": "A", "props": {"options": {"header": header}}},
                    ],
                },
            ],
        }

        imports = [declaration.render() for declaration in collect_imports(flatten(normalize(raw)))]

        assert imports == [
            'import { createBottomTabNavigator } from "@react-navigation/bottom-tabs";',
            'import { Header } from "./Header";',
        ]

    def test__same_module__symbols_merged(self) -> None:
        raw = {
            "config": {"path": "src", "lazy": False},
            "navigators": [
                {
                    "_tag": "Navigator",
                    "name": "App",
                    "children": [
                        {"_tag": "Screen", "name": "A", "path": "./screens"},
                        {"_tag": "Screen", "name": "B", "path": "./screens"},
                    ],
                },
            ],
        }

        imports = [declaration.render() for declaration in collect_imports(flatten(normalize(raw)))]

        assert 'import { AppA, AppB } from "./screens";' in imports


class TestDeclarations:
    """Tests for stack and component declarations."""

    def test__external_navigator__only_imported(self, app_flat: FlatTree) -> None:
        """An external navigator gets no stack or component of its own."""
        names = [
            declaration.name
            for declaration in build_navigation_module(app_flat)
            if isinstance(declaration, ts.VariableDeclaration)
        ]

        assert names == ["AppStack", "HomeStack", "HomeNavigator", "AppNavigator"]
        assert not any(name.startswith("Profile") for name in names)

    def test__export_flag__exports_component(self, app_flat: FlatTree) -> None:
        declarations = {
            declaration.name: declaration
            for declaration in build_navigation_module(app_flat)
            if isinstance(declaration, ts.VariableDeclaration)
        }

        assert declarations["AppNavigator"].exported is True
        assert declarations["HomeNavigator"].exported is False
        assert declarations["AppStack"].exported is False

    def test__full_module(self, app_flat: FlatTree) -> None:
        source = _render(app_flat)

        assert source == (
            'import * as React from "react";\n'
            'import * as route from "./routes.gen";\n'
            'import { createNativeStackNavigator } from "@react-navigation/native-stack";\n'
            'import { ProfileNavigator } from "./external";\n'
            'import { Login } from "src/screens/Login";\n'
            "\n"
            "const AppStack = createNativeStackNavigator();\n"
            "\n"
            "const HomeStack = createNativeStackNavigator();\n"
            "\n"
            "const HomeNavigator = () => {\n"
            "  return (\n"
            '    <HomeStack.Navigator initialRouteName={"Feed"}>\n'
            '      <HomeStack.Screen name={route.routeHomeFeed} getComponent={() => require("src/screens/Home/Feed").HomeFeed} />\n'
            '      <HomeStack.Screen name={route.routeHomePost} getComponent={() => require("src/screens/Home/Post").HomePost} />\n'
            "      <HomeStack.Group>\n"
            '        <HomeStack.Screen name={route.routeSharedDetail} getComponent={() => require("src/screens/Shared/Detail").SharedDetail} />\n'
            "      </HomeStack.Group>\n"
            "      <HomeStack.Group>\n"
            '        <HomeStack.Screen name={route.routeHomeCustomDetail} getComponent={() => require("src/screens/Home/Custom/Detail").HomeCustomDetail} />\n'
            "      </HomeStack.Group>\n"
            "    </HomeStack.Navigator>\n"
            "  );\n"
            "};\n"
            "\n"
            "export const AppNavigator = () => {\n"
            "  return (\n"
            "    <AppStack.Navigator>\n"
            "      <AppStack.Screen name={route.routeHomeNavigator} component={HomeNavigator} />\n"
            "      <AppStack.Screen name={route.routeProfileNavigator} component={ProfileNavigator} />\n"
            "      <AppStack.Screen name={route.routeLogin} component={Login} />\n"
            "    </AppStack.Navigator>\n"
            "  );\n"
            "};\n"
        )


class TestScreenElements:
    """Tests for screen element attributes."""

    def _screen_source(self, screen: dict[str, Any]) -> str:
        raw = {
            "config": {"path": "src"},
            "navigators": [{"_tag": "Navigator", "name": "App", "root": True, "children": [screen]}],
        }
        return _render(flatten(normalize(raw)))

    def test__props__precede_generated_attributes(self) -> None:
        source = self._screen_source(
            {
                "_tag": "Screen",
                "name": "Feed",
                "props": {"options": {"title": "Feed"}, "initialParams": {"page": 1}},
            }
        )

        assert (
            "<AppStack.Screen options={{\n"
            '        title: "Feed",\n'
            "      }} initialParams={{\n"
            "        page: 1,\n"
            '      }} name={route.routeFeed} getComponent={() => require("src/Feed").Feed} />'
        ) in source

    def test__name_prop__overridden_by_route(self) -> None:
        source = self._screen_source(
            {"_tag": "Screen", "name": "Feed", "lazy": False, "props": {"name": "ignored"}}
        )

        assert "<AppStack.Screen name={route.routeFeed} component={Feed} />" in source
        assert "ignored" not in source

    def test__screen_kind_navigator__symbol_suffixed(self) -> None:
        source = self._screen_source(
            {"_tag": "Screen", "name": "Settings", "type": "Navigator", "lazy": False}
        )

        assert 'import { SettingsNavigator } from "src/Settings";' in source
        assert "component={SettingsNavigator}" in source
