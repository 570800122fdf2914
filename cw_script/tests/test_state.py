from __future__ import annotations

import json
from pathlib import Path

import pytest

from cw_script.errors import NotFoundError, StateFileError
from cw_script.state import StateStore


def _read(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_missing_file_loads_as_empty_document(state_file: Path):
    store = StateStore(state_file)
    assert store.load() == {}
    assert not state_file.exists()


def test_ensure_scaffold_is_idempotent(state_file: Path):
    store = StateStore(state_file)

    assert store.ensure_scaffold("core", "counter") is True
    once = state_file.read_text(encoding="utf-8")

    assert store.ensure_scaffold("core", "counter") is False
    assert state_file.read_text(encoding="utf-8") == once
    assert _read(state_file) == {"core": {"counter": {}}}


def test_scaffold_keeps_existing_record(state_file: Path):
    state_file.write_text(json.dumps({"core": {"counter": {"addr": "terra1abc", "code_id": 7}}}))
    store = StateStore(state_file)

    store.ensure_scaffold("core", "counter")

    assert store.get_addr("core", "counter") == "terra1abc"
    assert store.get_code_id("core", "counter") == 7


def test_mutations_do_not_touch_sibling_records(state_file: Path):
    store = StateStore(state_file)
    store.set_addr("core", "y", "terra1yyy")
    store.set_code_id("other", "x", 3)
    store.set_addr("other", "y", "terra1other")

    store.set_code_id("core", "x", 42)
    store.set_addr("core", "x", "terra1xxx")

    assert _read(state_file) == {
        "core": {"y": {"addr": "terra1yyy"}, "x": {"code_id": 42, "addr": "terra1xxx"}},
        "other": {"x": {"code_id": 3}, "y": {"addr": "terra1other"}},
    }


def test_writes_from_two_stores_on_one_file_are_both_kept(state_file: Path):
    a = StateStore(state_file)
    b = StateStore(state_file)

    a.set_code_id("core", "a", 1)
    b.set_code_id("core", "b", 2)

    assert a.get_code_id("core", "b") == 2
    assert b.get_code_id("core", "a") == 1


def test_get_addr_not_found(state_file: Path):
    store = StateStore(state_file)
    with pytest.raises(NotFoundError):
        store.get_addr("core", "counter")

    store.ensure_scaffold("core", "counter")
    with pytest.raises(NotFoundError) as ei:
        store.get_addr("core", "counter")
    assert ei.value.data == {"group": "core", "contract": "counter"}


def test_get_code_id_not_found(state_file: Path):
    store = StateStore(state_file)
    store.set_addr("core", "counter", "terra1abc")
    with pytest.raises(NotFoundError):
        store.get_code_id("core", "counter")


def test_corrupt_file_is_fatal(state_file: Path):
    state_file.write_text("{ not json")
    store = StateStore(state_file)

    with pytest.raises(StateFileError):
        store.load()
    with pytest.raises(StateFileError):
        store.ensure_scaffold("core", "counter")
    # corrupt content is left for inspection
    assert state_file.read_text() == "{ not json"


def test_top_level_must_be_object(state_file: Path):
    state_file.write_text("[1, 2, 3]")
    with pytest.raises(StateFileError):
        StateStore(state_file).load()


def test_non_integer_code_id_is_rejected(state_file: Path):
    state_file.write_text(json.dumps({"core": {"counter": {"code_id": "12"}}}))
    with pytest.raises(StateFileError):
        StateStore(state_file).get_code_id("core", "counter")


def test_save_is_pretty_and_leaves_no_temp_files(tmp_path: Path):
    path = tmp_path / "nested" / "state.json"
    store = StateStore(path)
    store.set_code_id("core", "counter", 5)

    text = path.read_text(encoding="utf-8")
    assert text.startswith("{\n  ")
    assert [p.name for p in path.parent.iterdir()] == ["state.json"]


def test_records_lists_group(state_file: Path):
    store = StateStore(state_file)
    store.set_addr("core", "a", "terra1a")
    store.ensure_scaffold("core", "b")

    assert store.records("core") == {"a": {"addr": "terra1a"}, "b": {}}
    assert store.records("missing") == {}


@pytest.mark.parametrize("bad", [-1, True, "7"])
def test_set_code_id_rejects_non_unsigned(state_file: Path, bad):
    store = StateStore(state_file)
    store.ensure_scaffold("core", "counter")

    with pytest.raises(StateFileError):
        store.set_code_id("core", "counter", bad)
    assert _read(state_file) == {"core": {"counter": {}}}
