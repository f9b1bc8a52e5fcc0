"""Start and end frame inheritance."""
from __future__ import annotations

from shotchain.engine.frames import EndFrameSource, PromptSource, effective_end_frame, effective_start_frame
from shotchain.models import Shot


A_END = "https://x/a_end.png"


def test_inherited_start_syncs_from_predecessor(make_version) -> None:
    a, b = Shot(id="A"), Shot(id="B")
    a_version = make_version("A", 1, end_frame_url=A_END, end_frame_prompt="door swings open")
    b_version = make_version("B", 1, end_frame_url="https://x/b_end.png")

    start = effective_start_frame(b, b_version, a, a_version, was_marked_inherited=True)

    assert start.prompt_source is PromptSource.INHERITED
    assert start.locked
    assert start.synced
    assert start.url == A_END
    assert start.prompt == "door swings open"
    assert start.inherited_from == "A"


def test_independent_start_frame_is_not_clobbered(make_version) -> None:
    a, b = Shot(id="A"), Shot(id="B")
    a_version = make_version("A", 1, end_frame_url=A_END)
    b_version = make_version("B", 2, start_frame_url="https://x/b_own.png")

    start = effective_start_frame(b, b_version, a, a_version, was_marked_inherited=True)

    assert start.locked
    assert not start.synced
    assert start.prompt_source is PromptSource.INHERITED
    assert start.url == "https://x/b_own.png"
    assert b_version.start_frame_url == "https://x/b_own.png"


def test_matching_start_frame_counts_as_synced(make_version) -> None:
    a_version = make_version("A", 1, end_frame_url=A_END)
    b_version = make_version("B", 1, start_frame_url=A_END)
    start = effective_start_frame(Shot(id="B"), b_version, Shot(id="A"), a_version, True)
    assert start.synced and start.url == A_END


def test_link_without_inheritance_flag_behaves_as_unlinked(make_version) -> None:
    a_version = make_version("A", 1, end_frame_url=A_END)
    b_version = make_version("B", 1, start_frame_url="https://x/b_own.png", start_frame_prompt="hallway")
    start = effective_start_frame(Shot(id="B"), b_version, Shot(id="A"), a_version, False)
    assert start.prompt_source is PromptSource.OWN
    assert not start.locked
    assert start.url == "https://x/b_own.png"
    assert start.prompt == "hallway"


def test_missing_frames_yield_placeholder() -> None:
    start = effective_start_frame(Shot(id="B"), None, Shot(id="A"), None, True)
    assert start.locked
    assert not start.generated
    unlinked = effective_start_frame(Shot(id="B"), None, None, None, False)
    assert unlinked.url is None and not unlinked.locked


def test_end_frame_mirrors_successor_start(make_version) -> None:
    a_version = make_version("A", 1, start_frame_url="a_start.png", end_frame_url="a_end.png")
    b_version = make_version("B", 1, start_frame_url="b_start.png")
    end = effective_end_frame(Shot(id="A"), a_version, Shot(id="B"), b_version)
    assert end.source is EndFrameSource.NEXT_START
    assert end.url == "b_start.png"


def test_end_frame_falls_back_to_own_when_successor_is_empty(make_version) -> None:
    a_version = make_version("A", 1, start_frame_url="a_start.png", end_frame_url="a_end.png")
    end = effective_end_frame(Shot(id="A"), a_version, Shot(id="B"), None)
    assert end.source is EndFrameSource.OWN
    assert end.url == "a_end.png"


def test_end_frame_equal_to_start_is_treated_as_missing(make_version) -> None:
    version = make_version("A", 1, start_frame_url="same.png", end_frame_url="same.png")
    end = effective_end_frame(Shot(id="A"), version, None, None)
    assert end.source is EndFrameSource.NONE
    assert not end.generated
    assert effective_end_frame(Shot(id="A"), None, None, None).url is None
