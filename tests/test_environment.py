"""Tests for the Lua script environment."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import FIXTURES_DIR, DictResourceFinder, write_file
from prototype_loader.document import Document, DocumentKind
from prototype_loader.errors import ModuleResolutionError, ScriptExecutionError
from prototype_loader.lua.environment import ScriptEnvironment


class TestConstruction:
    def test_prototypes_table_starts_empty(self, env):
        assert env.eval("type(prototypes)") == "table"
        assert env.eval("next(prototypes)") is None

    def test_context_bindings_become_globals(self):
        env = ScriptEnvironment({"difficulty": 3, "title": "Hard"}, finder=DictResourceFinder())
        assert env.eval("difficulty * 2") == 6
        assert env.eval("title .. '!'") == "Hard!"

    def test_base_path_sets_search_path(self, tmp_path: Path):
        env = ScriptEnvironment({}, tmp_path)
        assert env.search_path == f"{tmp_path.as_posix()}/?.lua"

    def test_default_search_path_is_left_alone(self):
        env = ScriptEnvironment()
        assert "?.lua" in env.search_path
        assert env.search_path == env.eval("package.path")

    def test_explicit_search_path_wins(self, tmp_path: Path):
        env = ScriptEnvironment({}, tmp_path, search_path="lib/?.lua")
        assert env.search_path == "lib/?.lua"

    def test_package_searchpath_is_replaced(self):
        finder = DictResourceFinder({"lib/a/b.lua": ""})
        env = ScriptEnvironment(finder=finder)
        assert env.eval("package.searchpath('a.b', './?.lua;lib/?.lua')") == "lib/a/b.lua"
        missing = env.eval("package.searchpath('x', './?.lua;lib/?.lua')")
        assert missing == (None, "\n\t./x.lua\n\tlib/x.lua")

    def test_environments_do_not_share_registries(self, env):
        other = ScriptEnvironment(finder=DictResourceFinder())
        env.execute('prototypes["x"] = {class = "C", data = {}}')
        assert len(env.compute_data()) == 1
        assert len(other.compute_data()) == 0


class TestRunScript:
    def test_runs_script_from_base_path(self, script_dir: Path):
        write_file(script_dir, "monsters.lua", """\
            prototypes["goblin"] = {
                class = "com.example.Monster",
                data = { health = 42, drops = { "bone", "rag" } },
            }
        """)
        env = ScriptEnvironment({}, script_dir)
        env.run_script("monsters.lua")
        assert env.compute_data().to_python() == {
            "goblin": {"com.example.Monster": {"drops": ["bone", "rag"], "health": 42}},
        }

    def test_suffix_is_optional(self, script_dir: Path):
        write_file(script_dir, "a.lua", 'prototypes["a"] = {class = "A", data = {1}}')
        env = ScriptEnvironment({}, script_dir)
        env.run_script("a")
        assert "a" in env.compute_data().value

    def test_dotted_names_map_to_directories(self, script_dir: Path):
        write_file(script_dir, "items/weapons.lua", """\
            prototypes["sword"] = {class = "Weapon", data = {damage = 7}}
        """)
        env = ScriptEnvironment({}, script_dir)
        env.run_script("items.weapons")
        assert env.compute_data().to_python() == {"sword": {"Weapon": {"damage": 7}}}

    def test_returns_module_value(self):
        env = ScriptEnvironment(
            finder=DictResourceFinder({"m.lua": "return 42"}), search_path="?.lua",
        )
        assert env.run_script("m") == 42

    def test_module_runs_once(self):
        finder = DictResourceFinder({"counter.lua": "runs = (runs or 0) + 1"})
        env = ScriptEnvironment(finder=finder, search_path="?.lua")
        env.run_script("counter")
        env.run_script("counter.lua")
        env.execute('require("counter")')
        assert env.eval("runs") == 1

    def test_nested_require_goes_through_finder(self):
        finder = DictResourceFinder({
            "protos/main.lua": """
                local base = require("shared.base")
                prototypes["hero"] = {class = "Hero", data = {health = base.health}}
            """,
            "protos/shared/base.lua": "return {health = 100}",
        })
        env = ScriptEnvironment(finder=finder, search_path="protos/?.lua")
        env.run_script("main")
        assert env.compute_data().to_python() == {"hero": {"Hero": {"health": 100}}}
        assert "protos/shared/base.lua" in finder.requested

    def test_missing_script_lists_attempted_paths(self):
        env = ScriptEnvironment(finder=DictResourceFinder(), search_path="a/?.lua;b/?.lua")
        with pytest.raises(ScriptExecutionError) as excinfo:
            env.run_script("nothing.here")
        message = str(excinfo.value)
        assert "module 'nothing.here' not found" in message
        assert "\n\ta/nothing/here.lua\n\tb/nothing/here.lua" in message

    def test_missing_module_lists_only_finder_paths(self):
        env = ScriptEnvironment(finder=DictResourceFinder(), search_path="a/?.lua")
        with pytest.raises(ScriptExecutionError) as excinfo:
            env.run_script("nothing")
        message = str(excinfo.value)
        assert "\n\ta/nothing.lua" in message
        assert ".so" not in message

    def test_native_library_searchers_are_removed(self, env):
        assert env.eval("#package.searchers") == 2

    def test_runtime_error_propagates(self):
        env = ScriptEnvironment(
            finder=DictResourceFinder({"bad.lua": 'error("boom")'}), search_path="?.lua",
        )
        with pytest.raises(ScriptExecutionError, match="boom"):
            env.run_script("bad")

    def test_syntax_error_propagates(self):
        env = ScriptEnvironment(
            finder=DictResourceFinder({"broken.lua": "prototypes[ = "}), search_path="?.lua",
        )
        with pytest.raises(ScriptExecutionError, match="broken"):
            env.run_script("broken")

    def test_scripts_accumulate_and_last_write_wins(self):
        finder = DictResourceFinder({
            "one.lua": 'prototypes["x"] = {class = "Old", data = {v = 1}}',
            "two.lua": """
                prototypes["x"] = {class = "New", data = {v = 2}}
                prototypes["y"] = {class = "Other", data = {}}
            """,
        })
        env = ScriptEnvironment(finder=finder, search_path="?.lua")
        env.run_script("one")
        env.run_script("two")
        assert env.compute_data().to_python() == {
            "x": {"New": {"v": 2}},
            "y": {"Other": {}},
        }

    def test_context_objects_pass_through_as_opaque(self):
        factory = object()
        finder = DictResourceFinder({
            "p.lua": 'prototypes["p"] = {class = "C", data = {factory = factory}}',
        })
        env = ScriptEnvironment({"factory": factory}, finder=finder, search_path="?.lua")
        env.run_script("p")
        node = env.compute_data()["p"]["C"]["factory"]
        assert node.kind is DocumentKind.OPAQUE
        assert node.value is factory

    def test_fixture_script_matches_expected_json(self):
        env = ScriptEnvironment({}, FIXTURES_DIR)
        env.run_script("com.example.prototypes.test.lua")
        data = env.compute_data()
        assert len(data) == 1
        expected = json.loads(
            (FIXTURES_DIR / "com" / "example" / "prototypes" / "test.json").read_text()
        )
        assert data["test"].to_python() == expected
        assert data["test"]["com.example.TestPrototype"]["nested"]["big"].kind is DocumentKind.LONG


class TestResolveModule:
    def test_resolves_through_finder(self):
        env = ScriptEnvironment(
            finder=DictResourceFinder({"lib/a/b.lua": ""}), search_path="./?.lua;lib/?.lua",
        )
        assert env.resolve_module("a.b") == "lib/a/b.lua"

    def test_missing_module_raises(self):
        env = ScriptEnvironment(finder=DictResourceFinder(), search_path="./?.lua;lib/?.lua")
        with pytest.raises(ModuleResolutionError) as excinfo:
            env.resolve_module("a.b")
        assert excinfo.value.diagnostic == "\n\t./a/b.lua\n\tlib/a/b.lua"


class TestExecute:
    def test_execute_errors_are_wrapped(self, env):
        with pytest.raises(ScriptExecutionError):
            env.execute("local x = nil; x()")

    def test_eval_errors_are_wrapped(self, env):
        with pytest.raises(ScriptExecutionError):
            env.eval("(")


class TestToLua:
    def test_document_seeds_a_prototype(self, env):
        data = Document.from_python({"stats": {"hp": 5, "speed": 1.5}, "tags": ["a", "b"]})
        env.prototypes["seeded"] = env.to_lua(
            Document.object({"class": Document.string("C"), "data": data})
        )
        assert env.eval("prototypes.seeded.data.tags[2]") == "b"
        assert env.compute_data()["seeded"]["C"] == data
