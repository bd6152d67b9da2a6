import json

import pytest

from stashtrade.resumption import ResumptionError, State, StateWrapper


def test_missing_file_gives_no_state(tmp_path):
    wrapper = StateWrapper.load_from_file(tmp_path / "state.json")
    assert wrapper.inner is None
    assert wrapper.path == tmp_path / "state.json"


def test_update_save_load_round_trip(tmp_path):
    path = tmp_path / "state.json"
    wrapper = StateWrapper.load_from_file(path)
    wrapper.update(State(change_id="1-2-3", next_change_id="4-5-6"))
    wrapper.save()
    assert StateWrapper.load_from_file(path).inner == State("1-2-3", "4-5-6")


def test_update_replaces_previous_state(tmp_path):
    wrapper = StateWrapper.load_from_file(tmp_path / "state.json")
    wrapper.update(State("1", "2"))
    wrapper.update(State("2", "3"))
    assert wrapper.inner == State("2", "3")


def test_saved_file_is_pretty_json(tmp_path):
    path = tmp_path / "state.json"
    wrapper = StateWrapper(inner=State("1-1", "2-2"), path=path)
    wrapper.save()
    text = path.read_text(encoding="utf-8")
    assert json.loads(text) == {"change_id": "1-1", "next_change_id": "2-2"}
    assert '\n  "change_id": ' in text


def test_save_without_state_writes_null(tmp_path):
    path = tmp_path / "state.json"
    StateWrapper(inner=None, path=path).save()
    assert json.loads(path.read_text(encoding="utf-8")) is None
    assert StateWrapper.load_from_file(path).inner is None


def test_load_accepts_string_path(tmp_path):
    path = tmp_path / "state.json"
    StateWrapper(inner=State("7", "8"), path=path).save()
    assert StateWrapper.load_from_file(str(path)).inner == State("7", "8")


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ResumptionError):
        StateWrapper.load_from_file(path)


def test_missing_field_raises(tmp_path):
    path = tmp_path / "state.json"
    path.write_text('{"change_id": "1"}', encoding="utf-8")
    with pytest.raises(ResumptionError):
        StateWrapper.load_from_file(path)


def test_wrong_shape_raises(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ResumptionError):
        StateWrapper.load_from_file(path)