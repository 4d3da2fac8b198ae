import json
import threading

import pytest

from product_crawler.storage.product_index import ProductURLIndex
from product_crawler.storage.results import ResultsWriter, ResultsError, save_results


def test_record_preserves_discovery_order():
    index = ProductURLIndex()
    index.record("a.test", "https://a.test/p/2")
    index.record("b.test", "https://b.test/p/1")
    index.record("a.test", "https://a.test/p/1")

    assert index.snapshot() == {
        "a.test": ["https://a.test/p/2", "https://a.test/p/1"],
        "b.test": ["https://b.test/p/1"],
    }
    assert index.count("a.test") == 2
    assert index.count("missing.test") == 0
    assert len(index) == 3
    assert sorted(index.domains()) == ["a.test", "b.test"]


def test_snapshot_is_a_copy():
    index = ProductURLIndex()
    index.record("a.test", "https://a.test/p/1")
    snap = index.snapshot()
    snap["a.test"].append("tampered")
    assert index.snapshot() == {"a.test": ["https://a.test/p/1"]}


def test_concurrent_writers_do_not_interfere():
    index = ProductURLIndex()
    per_thread = 500

    def writer(domain):
        for i in range(per_thread):
            index.record(domain, f"https://{domain}/p/{i}")

    threads = [threading.Thread(target=writer, args=(f"d{n}.test",)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    snap = index.snapshot()
    assert len(snap) == 8
    for domain, urls in snap.items():
        assert urls == [f"https://{domain}/p/{i}" for i in range(per_thread)]


def test_results_round_trip(tmp_path):
    results = {"a.test": ["https://a.test/p/1"], "b.test": []}
    path = save_results(results, tmp_path / "out" / "product_urls.json")

    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == results
    assert path.read_text(encoding="utf-8").startswith('{\n  "a.test"')
    assert ResultsWriter().load(path) == results


def test_results_errors(tmp_path):
    writer = ResultsWriter()
    with pytest.raises(ResultsError):
        writer.load(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ResultsError):
        writer.load(bad)

    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(ResultsError):
        writer.save({}, blocker / "out.json")
