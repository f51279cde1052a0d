from __future__ import annotations

from app.models.project import Project, Source
from app.services.ranker import rank


def _p(pid: str, score: int, source: Source = Source.GITHUB) -> Project:
    return Project(id=pid, name=pid, url=f"https://example.com/{pid}", source=source, popularity_score=score)


def test_rank_descending_by_popularity():
    out = rank([_p("a", 5), _p("b", 20), _p("c", 1)])

    assert [p.popularity_score for p in out] == [20, 5, 1]


def test_rank_ties_keep_merge_order():
    out = rank([_p("first", 7), _p("top", 9), _p("second", 7, Source.HUGGING_FACE), _p("third", 7)])

    assert [p.id for p in out] == ["top", "first", "second", "third"]


def test_rank_mixes_stars_and_downloads_on_one_scale():
    out = rank([_p("repo", 300), _p("model", 12000, Source.HUGGING_FACE)])

    assert [p.id for p in out] == ["model", "repo"]
