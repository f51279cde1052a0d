"""Fuzzy relevance filter."""

from __future__ import annotations

from app.models.project import Project, Source
from app.services.relevance_service import filter_by_relevance, query_terms


def _project(pid: str, *, name: str, description: str = "", tags: list[str] | None = None) -> Project:
    return Project(
        id=pid,
        name=name,
        description=description,
        url=f"https://example.com/{pid}",
        source=Source.GITHUB,
        tags=tags or [],
    )


X = _project("x", name="lx", description="Locomotion controller for quadruped robots")
Y = _project("y", name="hg", description="Reinforcement learning for humanoid walking", tags=["humanoid"])
Z = _project("z", name="nv", description="ROS 2 navigation stack", tags=["navigation"])


def test_query_terms_split_on_commas_then_words():
    assert query_terms("Humanoid robot, gait") == [["humanoid", "robot"], ["gait"]]
    assert query_terms(" , ") == []
    assert query_terms(None) == []


def test_description_only_match_returns_only_that_item():
    assert filter_by_relevance([X, Y, Z], "quadruped") == [X]


def test_minor_misspelling_still_matches():
    assert filter_by_relevance([X, Y, Z], "quadrupd") == [X]


def test_partial_word_matches_tag():
    gripper = _project("g", name="gg", tags=["manipulation", "gripper"])

    assert filter_by_relevance([Z, gripper], "manipul") == [gripper]


def test_unrelated_query_excludes_everything():
    assert filter_by_relevance([X, Y, Z], "blockchain") == []


def test_short_token_does_not_match_unrelated_longer_word():
    assert filter_by_relevance([Z], "gait") == []
    assert filter_by_relevance([Z], "navigation") == [Z]


def test_short_tag_does_not_match_longer_tokens():
    tiny = _project("t", name="zz", tags=["ai"])

    assert filter_by_relevance([tiny], "gait planner") == []


def test_name_match_outranks_description_match():
    in_description = _project("d", name="zz", description="an open humanoid platform")
    in_name = _project("n", name="humanoid", description="")

    assert filter_by_relevance([in_description, in_name], "humanoid") == [in_name, in_description]


def test_any_comma_term_can_match():
    slam = _project("s", name="ss", tags=["slam"])
    gripper = _project("g", name="gg", description="soft gripper design")

    assert filter_by_relevance([slam, X, gripper], "gripper, slam") == [slam, gripper]


def test_no_query_passes_through_in_order():
    items = [Z, Y, X]

    assert filter_by_relevance(items, None) == items
    assert filter_by_relevance(items, "   ") == items


def test_threshold_override(monkeypatch):
    monkeypatch.setenv("SEARCH_FUZZY_THRESHOLD", "0")

    assert len(filter_by_relevance([X, Y, Z], "quadruped")) == 3
    assert filter_by_relevance([X, Y, Z], "quadruped", threshold=75) == [X]
