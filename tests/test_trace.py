from trie_knn.trace_utils import Trace, build_vote_table, render_vote_text


def test_trace_records_best_match_decisions(tast_knn):
    trace = Trace(enabled=True)
    assert tast_knn.classify("tast", trace=trace) == 1
    assert trace.features == list("tast")
    assert trace.actions() == [
        "CANDIDATE", "KEEP",
        "CANDIDATE", "REPLACED", "KEEP",
        "CANDIDATE", "SKIP",
        "VOTE",
    ]
    assert trace.events[0] == {"action": "CANDIDATE", "index": 0, "score": 2, "tally": {2: 1}}
    assert trace.events[-1] == {"action": "VOTE", "tally": {1: 1}, "label": 1}


def test_trace_records_k_best_decisions(tast_knn):
    trace = Trace()
    tast_knn.classify("tast", 1, trace=trace)
    assert trace.actions() == [
        "CANDIDATE", "KEEP",
        "CANDIDATE", "KEEP", "EVICT",
        "CANDIDATE", "SKIP",
        "VOTE",
    ]


def test_disabled_trace_stays_empty(tast_knn):
    trace = Trace(enabled=False)
    tast_knn.classify("tast", 2, trace=trace)
    assert trace.events == []
    assert trace.features is None


def test_vote_table_columns(tast_knn):
    trace = Trace()
    tast_knn.classify("tast", 1, trace=trace)
    table = build_vote_table(trace.events)

    assert table["candidate"] == ["1", "2", "3", "★"]
    assert table["score"] == ["2", "3", "3", "—"]
    assert table["action"] == ["×", "✓", "·", "★"]
    assert table["tally"] == ["2:1", "1:1", "1:1", "1:1"]
    assert table["reason"] == ["evicted by 2", "k-best", "≤ 3", "label=1"]


def test_vote_table_best_mode(tast_knn):
    trace = Trace()
    tast_knn.classify("tast", trace=trace)
    table = build_vote_table(trace.events)
    assert table["action"] == ["×", "✓", "·", "★"]
    assert table["reason"][:3] == ["replaced", "best", "≤ 3"]


def test_render_vote_text_aligns_rows(tast_knn):
    trace = Trace()
    tast_knn.classify("tast", 2, trace=trace)
    text = render_vote_text(build_vote_table(trace.events))
    lines = text.splitlines()
    assert [line.split(":")[0] for line in lines] == [
        "Candidate", "Score", "Action", "Tally", "Reason",
    ]
    assert len({len(line) for line in lines}) == 1


def test_vote_table_without_candidates():
    table = build_vote_table([{"action": "VOTE", "tally": {}, "label": 0}])
    assert table["tally"] == ["—"]
    assert table["reason"] == ["label=0"]
