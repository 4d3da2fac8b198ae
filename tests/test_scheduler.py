import asyncio
import time

import pytest

from product_crawler.crawler.scheduler import CrawlerScheduler, run_crawl
from product_crawler.utils.config import CrawlerConfig
from product_crawler.utils.monitoring import CrawlerMonitor


def chain_site(domain, page, length, products=()):
    """A site whose pages link one after another, plus optional product links."""
    root = f"https://{domain}"
    pages = {}
    for i in range(length):
        url = root if i == 0 else f"{root}/page/{i}"
        hrefs = [f"/page/{i + 1}"] if i + 1 < length else []
        if i == 0:
            hrefs.extend(products)
        pages[url] = page(*hrefs)
    return pages


def test_domains_results_are_isolated(fake_fetcher, page):
    pages = {}
    pages.update(chain_site("a.test", page, 3, products=["/product/a1", "/item/a2"]))
    pages.update(chain_site("b.test", page, 3, products=["/product/b1"]))
    fetcher = fake_fetcher(pages, delay=0.005)

    results = run_crawl(["a.test", "b.test"], rate_limit=0.001, concurrency=2, fetcher=fetcher)

    assert results == {
        "a.test": ["https://a.test/product/a1", "https://a.test/item/a2"],
        "b.test": ["https://b.test/product/b1"],
    }


def test_admission_bound_holds_across_domains(fake_fetcher, page):
    domains = [f"d{i}.test" for i in range(6)]
    pages = {}
    for domain in domains:
        pages.update(chain_site(domain, page, 4))
    fetcher = fake_fetcher(pages, delay=0.01)
    config = CrawlerConfig(domains=domains, rate_limit=0.005, concurrency=2)
    scheduler = CrawlerScheduler(config, fetcher=fetcher)

    asyncio.run(scheduler.crawl())

    assert scheduler.admission.peak_in_use == 2
    assert fetcher.peak_in_flight <= 2
    assert scheduler.admission.in_use == 0
    assert len(fetcher.calls) == 6 * 4


def test_domains_run_in_parallel(fake_fetcher, page):
    domains = ["a.test", "b.test", "c.test"]
    pages = {}
    for domain in domains:
        pages.update(chain_site(domain, page, 2))
    fetcher = fake_fetcher(pages)

    start = time.monotonic()
    run_crawl(domains, rate_limit=0.1, concurrency=3, fetcher=fetcher)
    elapsed = time.monotonic() - start

    # Two pages per domain at 0.1s each; serial domains would take 0.6s
    assert elapsed < 0.5


def test_unreachable_domain_does_not_affect_others(fake_fetcher, page):
    pages = chain_site("good.test", page, 2, products=["/p/1"])
    fetcher = fake_fetcher(pages, failing={"https://down.test"})

    results = run_crawl(["down.test", "good.test"], rate_limit=0, concurrency=1, fetcher=fetcher)

    assert results == {"good.test": ["https://good.test/p/1"]}
    assert "https://down.test" in fetcher.calls


def test_traversal_crash_is_isolated(fake_fetcher, page):
    class CrashingMonitor(CrawlerMonitor):
        def record_page_fetched(self, domain, fetch_time):
            if domain == "bad.test":
                raise RuntimeError("monitor failure")
            super().record_page_fetched(domain, fetch_time)

    pages = {}
    pages.update(chain_site("bad.test", page, 1, products=["/p/1"]))
    pages.update(chain_site("ok.test", page, 1, products=["/p/2"]))
    fetcher = fake_fetcher(pages)
    config = CrawlerConfig(domains=["bad.test", "ok.test"], rate_limit=0, concurrency=2)
    scheduler = CrawlerScheduler(config, fetcher=fetcher, monitor=CrashingMonitor())

    results = asyncio.run(scheduler.crawl())

    assert results == {"ok.test": ["https://ok.test/p/2"]}
    assert scheduler.admission.in_use == 0


def test_monitor_counts(fake_fetcher, page):
    pages = chain_site("a.test", page, 2, products=["/product/1"])
    fetcher = fake_fetcher(pages, failing=set())
    monitor = CrawlerMonitor()
    config = CrawlerConfig(domains=["a.test"], rate_limit=0, concurrency=1)

    asyncio.run(CrawlerScheduler(config, fetcher=fetcher, monitor=monitor).crawl())

    summary = monitor.get_summary()
    assert summary["metrics"]["pages_fetched"] == 2
    assert summary["metrics"]["product_urls"] == 1
    assert b'crawler_product_urls_total{domain="a.test"} 1.0' in monitor.metrics.export_text()


def test_invalid_config_rejected():
    with pytest.raises(ValueError):
        CrawlerScheduler(CrawlerConfig(domains=["a.test"], concurrency=0))
    with pytest.raises(ValueError):
        CrawlerScheduler(CrawlerConfig(domains=["https://a.test"]))


def test_repeated_domain_rejected():
    with pytest.raises(ValueError, match="more than once"):
        CrawlerScheduler(CrawlerConfig(domains=["a.test", "b.test", "a.test"]))
