from product_crawler.crawler.urls import resolve_url, is_same_host
from product_crawler.crawler.classifier import is_product_url

ROOT = "https://shop.example"


def test_resolve_relative_and_absolute_hrefs():
    assert resolve_url(ROOT, "/about") == "https://shop.example/about"
    assert resolve_url("https://shop.example/a/b", "c") == "https://shop.example/a/c"
    assert resolve_url(ROOT, "https://other.example/x") == "https://other.example/x"
    assert resolve_url(ROOT, "//cdn.example/img") == "https://cdn.example/img"


def test_resolve_malformed_input_yields_no_link():
    assert resolve_url("http://[::1", "/x") == ""
    assert resolve_url(ROOT, "http://[bad") == ""


def test_same_host_compares_host_and_port():
    assert is_same_host(ROOT, "https://shop.example/product/1")
    assert is_same_host(ROOT, "http://shop.example/about")
    assert is_same_host(ROOT, "https://user@shop.example/about")
    assert not is_same_host(ROOT, "https://shop.example:8443/about")
    assert not is_same_host(ROOT, "https://www.shop.example/about")
    assert not is_same_host(ROOT, "")


def test_same_host_malformed_is_false():
    assert not is_same_host(ROOT, "http://[::1")
    assert not is_same_host("http://[::1", ROOT)


def test_product_markers():
    for url in ("https://x.com/product/123", "https://x.com/item/9",
                "https://x.com/p/5", "https://x.com/dp/ABC",
                "https://x.com/shoes/product/red-runner"):
        assert is_product_url(url), url


def test_non_product_urls():
    for url in ("https://x.com/about", "https://x.com/category/shoes",
                "https://x.com/products", "https://x.com/p",
                "https://x.com/search?next=/product/1", "https://x.com/#/item/2"):
        assert not is_product_url(url), url


def test_malformed_url_is_not_a_product():
    assert not is_product_url("http://[::1/product/1")
