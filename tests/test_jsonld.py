"""
Tests for the linked-data extractor (skinradar/scraper/jsonld.py).
"""

from __future__ import annotations

from skinradar.scraper.jsonld import extract_structured_data, find_item_list


def test_extracts_all_valid_blocks() -> None:
    html = """
    <html><head>
      <script type="application/ld+json">{"@type": "WebSite", "name": "csgoskins"}</script>
      <script type="application/ld+json">
        {"@type": "ItemList", "name": "AWP Skins", "itemListElement": []}
      </script>
    </head></html>
    """
    objects = extract_structured_data(html)
    assert [o["@type"] for o in objects] == ["WebSite", "ItemList"]


def test_skips_malformed_and_empty_blocks() -> None:
    html = """
    <script type="application/ld+json">{"@type": "ItemList", broken</script>
    <script type="application/ld+json">   </script>
    <script type="application/ld+json">{"@type": "BreadcrumbList"}</script>
    """
    objects = extract_structured_data(html)
    assert objects == [{"@type": "BreadcrumbList"}]


def test_ignores_other_script_types() -> None:
    html = """
    <script>var x = {"@type": "ItemList"};</script>
    <script type="application/json">{"@type": "ItemList"}</script>
    """
    assert extract_structured_data(html) == []


def test_no_blocks_returns_empty_list() -> None:
    assert extract_structured_data("<html><body>No data</body></html>") == []


def test_find_item_list_picks_item_list() -> None:
    objects = [{"@type": "WebSite"}, {"@type": "ItemList", "name": "AK-47 Skins"}]
    assert find_item_list(objects) == {"@type": "ItemList", "name": "AK-47 Skins"}


def test_find_item_list_returns_none_when_absent() -> None:
    assert find_item_list([{"@type": "WebSite"}, "text", 42]) is None
    assert find_item_list([]) is None


def test_find_item_list_inside_array_and_graph() -> None:
    as_array = [[{"@type": "Organization"}, {"@type": "ItemList", "name": "array"}]]
    as_graph = [{"@context": "https://schema.org", "@graph": [{"@type": "ItemList", "name": "graph"}]}]

    assert find_item_list(as_array)["name"] == "array"
    assert find_item_list(as_graph)["name"] == "graph"
