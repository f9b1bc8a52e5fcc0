"""Snapshot parsing, persistence and settings."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from shotchain.config import ShotchainSettings
from shotchain.errors import SnapshotError, UnknownShotError
from shotchain.models import FrameMode, StoryboardState, load_state, save_state
from shotchain.session import EditorSession


HOST_PAYLOAD = {
    "scenes": [{"id": "intro", "title": "Intro", "sceneNumber": 1, "shotIds": ["A", "B", "C"], "videoModel": "kling"}],
    "shots": [
        {"id": "A", "sceneId": "intro", "shotNumber": 1, "currentVersionId": "va1"},
        {"id": "B", "sceneId": "intro", "shotNumber": 2, "currentVersionId": "vb1", "frameMode": "start-end"},
        {"id": "C", "sceneId": "intro", "shotNumber": 3},
    ],
    "versions": [
        {"id": "va1", "shotId": "A", "versionNumber": 1, "endFrameUrl": "https://x/a_end.png"},
        {"id": "vb1", "shotId": "B", "versionNumber": 1, "startFrameUrl": None},
    ],
    "continuityGroups": {
        "intro": [{"id": "g1", "sceneId": "intro", "groupNumber": 1, "shotIds": ["A", "B"], "status": "approved"}]
    },
    "inheritedStartFrames": ["B"],
    "defaultFrameMode": "start-end",
}


def test_host_payload_is_parsed_from_camel_case() -> None:
    state = StoryboardState.model_validate(HOST_PAYLOAD)

    assert [s.id for s in state.ordered_shots("intro")] == ["A", "B", "C"]
    assert state.versions_for("A")[0].end_frame_url == "https://x/a_end.png"
    assert state.groups_for("intro")[0].is_approved
    assert state.was_marked_inherited("B")
    assert state.shot("B").frame_mode is FrameMode.START_END
    assert state.scene_of("C").id == "intro"

    view = EditorSession(state).shot_view("B")
    assert view.start_frame.url == "https://x/a_end.png"
    assert view.start_frame.locked
    assert view.video_model == "kling"


def test_require_shot_raises_for_unknown_id() -> None:
    state = StoryboardState.model_validate(HOST_PAYLOAD)
    with pytest.raises(UnknownShotError) as excinfo:
        state.require_shot("Z")
    assert isinstance(excinfo.value, KeyError)
    assert state.ordered_shots("missing") == []


def test_snapshot_round_trip(tmp_path: Path) -> None:
    state = StoryboardState.model_validate(HOST_PAYLOAD)
    path = save_state(tmp_path / "snapshots" / "intro.json", state)

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert "continuityGroups" in raw
    assert raw["shots"]["A"]["currentVersionId"] == "va1"

    loaded = load_state(path)
    assert loaded == state


def test_explicit_null_transition_survives_a_save(tmp_path: Path) -> None:
    payload = dict(HOST_PAYLOAD, shots=[{"id": "A", "sceneId": "intro", "transition": None}])
    state = StoryboardState.model_validate(payload)
    assert state.shot("A").transition is None

    path = save_state(tmp_path / "intro.json", state)
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["shots"]["A"]["transition"] is None

    loaded = load_state(path)
    assert loaded.shot("A").transition is None
    assert loaded == state


def test_invalid_snapshot_raises(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text(json.dumps({"versions": [{"id": "v1", "versionNumber": 1}]}), encoding="utf-8")
    with pytest.raises(SnapshotError):
        load_state(broken)

    with pytest.raises(SnapshotError):
        load_state(tmp_path / "missing.json")


def test_version_patches_produce_new_instances() -> None:
    state = StoryboardState.model_validate(HOST_PAYLOAD)
    original = state.versions_for("B")[0]
    patched = original.with_fields(start_frame_url="https://x/b_own.png")
    assert patched.start_frame_url == "https://x/b_own.png"
    assert original.start_frame_url is None
    with pytest.raises(ValueError):
        original.with_fields(colour="red")


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHOTCHAIN_DEFAULT_FRAME_MODE", "start-end")
    monkeypatch.setenv("SHOTCHAIN_CONTINUITY_LOCKED", "false")
    configured = ShotchainSettings()
    assert configured.default_frame_mode is FrameMode.START_END
    assert configured.continuity_locked is False

    session = EditorSession(StoryboardState.model_validate({**HOST_PAYLOAD, "defaultFrameMode": None}), settings=configured)
    assert session.default_frame_mode is FrameMode.START_END
    assert not session.continuity.is_linked_to_next("intro", 0)
