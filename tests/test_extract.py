"""Tests for registry extraction from the prototypes table."""

from __future__ import annotations

import pytest

from prototype_loader.document import Document
from prototype_loader.errors import ConversionError, MalformedPrototypeError
from prototype_loader.lua.extract import extract_entries, extract_registry


class TestExtractRegistry:
    def test_array_data(self, env):
        env.execute('prototypes["x"] = {class = "C", data = {1, 2, 3}}')
        assert env.compute_data().to_python() == {"x": {"C": [1, 2, 3]}}

    def test_object_data(self, env):
        env.execute('prototypes["x"] = {class = "C", data = {a = 1, b = true}}')
        assert env.compute_data().to_python() == {"x": {"C": {"a": 1, "b": True}}}

    def test_top_level_is_object_even_when_empty(self, env):
        doc = env.compute_data()
        assert doc == Document.object()

    def test_entry_shape(self, env):
        env.execute('prototypes["x"] = {class = "C", data = {}}')
        doc = env.compute_data()
        assert list(doc) == ["x"]
        assert list(doc["x"]) == ["C"]

    def test_names_sorted(self, env):
        env.execute("""
            prototypes["zeta"] = {class = "C", data = {}}
            prototypes["alpha"] = {class = "C", data = {}}
            prototypes["mid"] = {class = "C", data = {}}
        """)
        assert list(env.compute_data()) == ["alpha", "mid", "zeta"]

    def test_numeric_names_are_coerced(self, env):
        env.execute('prototypes[7] = {class = "C", data = {}}')
        assert list(env.compute_data()) == ["7"]

    def test_direct_call_without_identity(self, env):
        env.execute('prototypes["x"] = {class = "C", data = {n = 2^40}}')
        doc = extract_registry(env.prototypes)
        assert doc["x"]["C"]["n"] == Document.long(2**40)

    def test_extra_entry_fields_are_ignored(self, env):
        env.execute('prototypes["x"] = {class = "C", data = {}, note = "ignored"}')
        assert env.compute_data().to_python() == {"x": {"C": {}}}


class TestExtractEntries:
    def test_entries_carry_source(self, env):
        env.execute('prototypes["x"] = {class = "C", data = {v = 1}}')
        (entry,) = extract_entries(env.prototypes, source="inline")
        assert entry.name == "x"
        assert entry.class_name == "C"
        assert entry.data.to_python() == {"v": 1}
        assert entry.source == "inline"

    def test_non_table_registry(self, env):
        with pytest.raises(MalformedPrototypeError, match="not a table"):
            extract_entries(env.eval("42"))


class TestMalformedEntries:
    @pytest.mark.parametrize(
        "entry, message",
        [
            ('"just a string"', "must be a table"),
            ('{data = {}}', "'class' must be a string"),
            ('{class = 12, data = {}}', "'class' must be a string"),
            ('{class = "C"}', "'data' must be a table"),
            ('{class = "C", data = 5}', "'data' must be a table"),
        ],
    )
    def test_malformed_entry_fails_whole_extraction(self, env, entry, message):
        env.execute(f"""
            prototypes["good"] = {{class = "C", data = {{}}}}
            prototypes["bad"] = {entry}
        """)
        with pytest.raises(MalformedPrototypeError, match=message) as excinfo:
            env.compute_data()
        assert excinfo.value.name == "bad"

    def test_unconvertible_data_fails_whole_extraction(self, env):
        env.execute("""
            prototypes["good"] = {class = "C", data = {1}}
            prototypes["bad"] = {class = "C", data = {callback = function() end}}
        """)
        with pytest.raises(ConversionError) as excinfo:
            env.compute_data()
        assert excinfo.value.path == "bad.callback"

    def test_cyclic_data_fails(self, env):
        env.execute("""
            local data = {}
            data.me = data
            prototypes["loop"] = {class = "C", data = data}
        """)
        with pytest.raises(ConversionError, match="cyclic table reference"):
            env.compute_data()

    def test_function_in_array_data_fails(self, env):
        env.execute('prototypes["x"] = {class = "C", data = {1, 2, f = function() end}}')
        with pytest.raises(ConversionError) as excinfo:
            env.compute_data()
        assert excinfo.value.path == "x.f"

    def test_invalid_utf8_class_name_fails(self, env):
        env.execute(r'prototypes["x"] = {class = "\xff", data = {}}')
        with pytest.raises(ConversionError, match="UTF-8") as excinfo:
            env.compute_data()
        assert excinfo.value.path == "x"
