from __future__ import annotations

from skillalign.catalog import load_roles, role_lookup
from skillalign.dsa import DSAProgress


def _backend_topics():
    return role_lookup(load_roles())["backend"].dsa_topics


def test_snapshot_round_trip_uses_camel_case_keys():
    snapshot = {"completed": ["arrays"], "inProgress": ["hashmaps"], "notStarted": ["trees", "graphs"]}
    progress = DSAProgress.from_snapshot(snapshot)
    assert progress.in_progress == ("hashmaps",)
    assert progress.to_snapshot() == snapshot


def test_overlapping_sets_keep_most_advanced_state():
    progress = DSAProgress.from_snapshot(
        {"completed": ["arrays"], "inProgress": ["arrays", "trees"], "notStarted": ["trees", "dp", "dp"]}
    )
    assert progress.completed == ("arrays",)
    assert progress.in_progress == ("trees",)
    assert progress.not_started == ("dp",)


def test_malformed_snapshot_is_empty():
    assert DSAProgress.from_snapshot(None) == DSAProgress()
    assert DSAProgress.from_snapshot({"completed": "arrays"}).completed == ()


def test_seed_start_and_complete():
    progress = DSAProgress.seed(_backend_topics())
    assert progress.status("trees") == "not-started"
    progress = progress.start("trees")
    assert progress.status("trees") == "in-progress"
    assert "trees" not in progress.not_started
    progress = progress.complete("trees")
    assert progress.status("trees") == "completed"
    assert progress.start("trees") == progress


def test_required_progress_ignores_optional_topics():
    topics = _backend_topics()
    progress = DSAProgress.from_snapshot({"completed": ["arrays", "dp"]})
    assert progress.required_progress_pct(topics) == 20.0
    assert DSAProgress().required_progress_pct([]) == 0.0


def test_unknown_topic_reports_not_started():
    assert DSAProgress().status("segment-trees") == "not-started"
