#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Test RelevanceSet combination and ranking
"""

import itertools

import pytest

from KeywordSearch.index.index_lookup import IndexLookup, InMemoryIndex
from KeywordSearch.relevance.relevance_set import RelevanceSet, max_scores, min_scores


A = RelevanceSet({"doc1": 3, "doc2": 5})
B = RelevanceSet({"doc2": 2, "doc3": 7})
EMPTY = RelevanceSet()

SAMPLES = [
    EMPTY,
    A,
    B,
    RelevanceSet({"doc1": 1}),
    RelevanceSet({"doc3": 4, "doc4": 4, "doc5": 1000}),
    RelevanceSet({"doc1": 300, "doc2": 300, "doc3": 300, "doc6": 2}),
]
PAIRS = list(itertools.product(SAMPLES, repeat=2))
ALL_IDS = ["doc1", "doc2", "doc3", "doc4", "doc5", "doc6", "missing"]


class FailingIndex(IndexLookup):
    def get_counts(self, term):
        raise ConnectionError("index storage unavailable")


def test_example_union():
    assert A.union(B).scores == {"doc1": 3, "doc2": 7, "doc3": 7}


def test_example_intersection():
    assert A.intersection(B).scores == {"doc2": 7}


def test_example_difference():
    assert A.difference(B).scores == {"doc1": 3}
    assert B.difference(A).scores == {"doc3": 7}


def test_example_rank_breaks_ties_by_id():
    assert A.union(B).rank() == [("doc1", 3), ("doc2", 7), ("doc3", 7)]


def test_empty_operand():
    assert A.union(EMPTY) == A
    assert EMPTY.union(A) == A
    assert A.intersection(EMPTY) == EMPTY
    assert A.difference(EMPTY) == A
    assert EMPTY.difference(A) == EMPTY


def test_lookup_missing_is_zero():
    assert A.lookup("doc1") == 3
    assert A.lookup("nope") == 0
    assert EMPTY.lookup("doc1") == 0


def test_zero_scores_are_not_stored():
    result = RelevanceSet({"doc1": 0, "doc2": 4})
    assert "doc1" not in result
    assert len(result) == 1
    assert result.rank() == [("doc2", 4)]


@pytest.mark.parametrize("scores", [{"doc1": -1}, {"doc1": 1.5}, {"doc1": "3"}, {"doc1": True}])
def test_invalid_scores_rejected(scores):
    with pytest.raises(ValueError):
        RelevanceSet(scores)


def test_construction_copies_mapping():
    source = {"doc1": 2}
    result = RelevanceSet(source)
    source["doc1"] = 99
    source["doc2"] = 1
    assert result.scores == {"doc1": 2}


def test_scores_view_is_read_only():
    with pytest.raises(TypeError):
        A.scores["doc1"] = 10


def test_combinators_do_not_mutate_operands():
    left = RelevanceSet({"doc1": 1, "doc2": 2})
    right = RelevanceSet({"doc2": 3})
    left.union(right)
    left.intersection(right)
    left.difference(right)
    assert left.scores == {"doc1": 1, "doc2": 2}
    assert right.scores == {"doc2": 3}


def test_union_with_itself_doubles_scores():
    assert A.union(A).scores == {"doc1": 6, "doc2": 10}


@pytest.mark.parametrize("a,b", PAIRS)
def test_union_is_commutative_and_additive(a, b):
    assert a.union(b) == b.union(a)
    for doc_id in ALL_IDS:
        assert a.union(b).lookup(doc_id) == a.lookup(doc_id) + b.lookup(doc_id)


@pytest.mark.parametrize("a,b,c", list(itertools.product(SAMPLES[:4], repeat=3)))
def test_union_is_associative(a, b, c):
    assert a.union(b).union(c) == a.union(b.union(c))


@pytest.mark.parametrize("a,b", PAIRS)
def test_intersection_membership(a, b):
    result = a.intersection(b)
    for doc_id in ALL_IDS:
        assert (doc_id in result) == (a.lookup(doc_id) > 0 and b.lookup(doc_id) > 0)
        if doc_id in result:
            assert result.lookup(doc_id) == a.lookup(doc_id) + b.lookup(doc_id)


@pytest.mark.parametrize("a,b", PAIRS)
def test_difference_membership_keeps_scores(a, b):
    result = a.difference(b)
    for doc_id in ALL_IDS:
        assert (doc_id in result) == (a.lookup(doc_id) > 0 and b.lookup(doc_id) == 0)
        if doc_id in result:
            assert result.lookup(doc_id) == a.lookup(doc_id)


@pytest.mark.parametrize("a,b", PAIRS)
def test_intersection_and_difference_partition(a, b):
    both = a.intersection(b)
    only = a.difference(b)
    for doc_id in a:
        assert (doc_id in both) != (doc_id in only)
    assert len(both) + len(only) == len(a)


@pytest.mark.parametrize("a", SAMPLES)
def test_rank_complete_and_ordered(a):
    ranked = a.rank()
    assert len(ranked) == len(a)
    assert sorted(doc_id for doc_id, _ in ranked) == sorted(a)
    for (id1, score1), (id2, score2) in zip(ranked, ranked[1:]):
        assert score1 < score2 or (score1 == score2 and id1 < id2)


def test_rank_many_equal_large_scores():
    # Large equal scores must not be lost or duplicated
    scores = {f"https://example.org/page{i}": 100000 for i in range(50)}
    scores["https://example.org/other"] = 1
    ranked = RelevanceSet(scores).rank()
    assert len(ranked) == 51
    assert ranked[0] == ("https://example.org/other", 1)
    assert [doc_id for doc_id, _ in ranked[1:]] == sorted(scores.keys() - {"https://example.org/other"})


def test_rank_is_deterministic_across_insertion_order():
    first = RelevanceSet({"b": 2, "a": 2, "c": 1})
    second = RelevanceSet({"c": 1, "a": 2, "b": 2})
    assert first.rank() == second.rank()
    assert first.rank() == first.rank()
    assert repr(first) == repr(second)


def test_rank_descending_and_top():
    result = A.union(B)
    assert result.rank(descending=True) == [("doc2", 7), ("doc3", 7), ("doc1", 3)]
    assert result.top(2) == [("doc2", 7), ("doc3", 7)]
    assert result.top(0) == []


def test_rank_returns_fresh_snapshot():
    ranked = A.rank()
    ranked.clear()
    assert len(A.rank()) == 2


def test_operators():
    assert (A | B) == A.union(B)
    assert (A & B) == A.intersection(B)
    assert (A - B) == A.difference(B)


def test_max_combine_rule():
    a = RelevanceSet({"doc1": 3, "doc2": 5}, combine=max_scores)
    assert a.union(B).scores == {"doc1": 3, "doc2": 5, "doc3": 7}
    assert a.intersection(B).scores == {"doc2": 5}
    # The combine rule carries over to the results
    assert a.union(B).combine_rule is max_scores


def test_min_combine_rule():
    a = RelevanceSet({"doc1": 3, "doc2": 5}, combine=min_scores)
    assert a.intersection(B).scores == {"doc2": 2}
    assert a.difference(B).scores == {"doc1": 3}


def test_search_wraps_index_counts():
    index = InMemoryIndex({"java": {"doc1": 3, "doc2": 5}})
    assert RelevanceSet.search("java", index) == A
    assert RelevanceSet.search("cobol", index) == EMPTY


def test_search_propagates_index_errors():
    with pytest.raises(ConnectionError):
        RelevanceSet.search("java", FailingIndex())
