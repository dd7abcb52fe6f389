"""Tests de los parsers de formato de cada plataforma."""

import json
from unittest.mock import MagicMock

import pytest
from lxml import etree

from taxonomies import ParseError, flatten_categories, get_source, parse_document
from taxonomies.glami import parse_glami_xml
from taxonomies.google import parse_google_taxonomy
from taxonomies.heureka import HeurekaSource, parse_heureka_xml
from taxonomies.zbozi import ZboziSource, parse_zbozi_json

HEUREKA_XML = """<?xml version="1.0" encoding="utf-8"?>
<HEUREKA>
  <CATEGORY>
    <CATEGORY_ID>1</CATEGORY_ID>
    <CATEGORY_NAME>Sport</CATEGORY_NAME>
    <CATEGORY>
      <CATEGORY_ID>2</CATEGORY_ID>
      <CATEGORY_NAME>Obuv</CATEGORY_NAME>
      <CATEGORY>
        <CATEGORY_ID>3</CATEGORY_ID>
        <CATEGORY_NAME>Běžecké boty</CATEGORY_NAME>
      </CATEGORY>
    </CATEGORY>
    <CATEGORY>
      <CATEGORY_NAME>Bez ID</CATEGORY_NAME>
      <CATEGORY>
        <CATEGORY_ID>4</CATEGORY_ID>
        <CATEGORY_NAME>Míče</CATEGORY_NAME>
      </CATEGORY>
    </CATEGORY>
  </CATEGORY>
  <CATEGORY>
    <CATEGORY_ID>9</CATEGORY_ID>
    <CATEGORY_NAME>Dům a zahrada</CATEGORY_NAME>
  </CATEGORY>
</HEUREKA>
"""

ZBOZI_JSON = json.dumps([
    {
        "id": 10,
        "name": "Elektronika",
        "categoryText": "Elektronika",
        "children": [
            {"id": 11, "name": "Telefony", "categoryText": "Elektronika | Mobilní telefony"},
            {
                "id": None,
                "name": "Skupina",
                "children": [{"id": "12", "name": "Tablety"}],
            },
        ],
    },
])

GLAMI_XML = """<GLAMI>
  <CATEGORY>
    <CATEGORY_ID>100</CATEGORY_ID>
    <CATEGORY_NAME>Tenisky</CATEGORY_NAME>
    <CATEGORY_FULLNAME>Dámské boty | Tenisky</CATEGORY_FULLNAME>
  </CATEGORY>
  <CATEGORY>
    <CATEGORY_ID>abc</CATEGORY_ID>
    <CATEGORY_NAME>Rozbitá</CATEGORY_NAME>
    <CATEGORY_FULLNAME>Rozbitá</CATEGORY_FULLNAME>
  </CATEGORY>
  <CATEGORY>
    <CATEGORY_ID>101</CATEGORY_ID>
    <CATEGORY_NAME>Kabelky</CATEGORY_NAME>
  </CATEGORY>
</GLAMI>
"""

GOOGLE_TXT = (
    "# Google_Product_Taxonomy_Version: 2021-09-21\n"
    "1 - Zvířata a chovatelské potřeby\n"
    "3237 - Zvířata a chovatelské potřeby > Živá zvířata\n"
    "\n"
    "řádek bez ID\n"
)


class TestHeureka:
    def test_nested_tree(self):
        roots = parse_heureka_xml(HEUREKA_XML)

        assert [c.id for c in roots] == [1, 9]
        sport = roots[0]
        assert [c.id for c in sport.children] == [2, 4]
        assert sport.children[0].children[0].full_path == "Sport | Obuv | Běžecké boty"

    def test_incomplete_block_hoists_children(self):
        roots = parse_heureka_xml(HEUREKA_XML)

        balls = roots[0].children[1]
        assert balls.id == 4
        assert balls.full_path == "Sport | Míče"

    def test_flattened_leaves(self):
        leaves = flatten_categories(parse_heureka_xml(HEUREKA_XML))

        assert [(c.id, c.full_path) for c in leaves] == [
            (3, "Sport | Obuv | Běžecké boty"),
            (4, "Sport | Míče"),
            (9, "Dům a zahrada"),
        ]

    def test_malformed_xml_raises(self):
        with pytest.raises(etree.XMLSyntaxError):
            parse_heureka_xml("<HEUREKA><CATEGORY>")

    def test_source_wraps_parse_errors(self):
        http = MagicMock()
        http.get_text.return_value = "<HEUREKA><CATEGORY>"

        with pytest.raises(ParseError) as exc_info:
            HeurekaSource(http_client=http).fetch()

        assert exc_info.value.platform == "heureka"


class TestZbozi:
    def test_uses_category_text_verbatim(self):
        roots = parse_zbozi_json(ZBOZI_JSON)

        phones = roots[0].children[0]
        assert phones.full_path == "Elektronika | Mobilní telefony"

    def test_structural_nodes_are_not_emitted(self):
        roots = parse_zbozi_json(ZBOZI_JSON)

        children = roots[0].children
        assert [c.id for c in children] == [11, 12]
        assert children[1].full_path == "Elektronika | Skupina | Tablety"

    def test_accepts_decoded_list(self):
        roots = parse_zbozi_json([{"id": 5, "name": "Knihy"}])

        assert roots[0].full_path == "Knihy"

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError):
            parse_zbozi_json("{not json")

    def test_non_list_document_raises(self):
        with pytest.raises(ValueError):
            parse_zbozi_json("42")

    def test_source_wraps_invalid_json(self):
        http = MagicMock()
        http.get_text.return_value = "{not json"

        with pytest.raises(ParseError):
            ZboziSource(http_client=http).fetch()


class TestGlami:
    def test_only_complete_blocks(self):
        categories = parse_glami_xml(GLAMI_XML)

        assert len(categories) == 1
        assert categories[0].id == 100
        assert categories[0].name == "Tenisky"
        assert categories[0].full_path == "Dámské boty | Tenisky"
        assert categories[0].is_leaf


class TestGoogle:
    def test_lines_with_ids(self):
        categories = parse_google_taxonomy(GOOGLE_TXT)

        assert [c.id for c in categories] == [1, 3237]
        assert categories[1].name == "Živá zvířata"
        assert categories[1].full_path == "Zvířata a chovatelské potřeby > Živá zvířata"

    def test_empty_document(self):
        assert parse_google_taxonomy("") == []


class TestRegistry:
    def test_parse_document_dispatches_by_platform(self):
        assert parse_document("google", "5 - Dárky")[0].name == "Dárky"

    def test_unknown_platform(self):
        with pytest.raises(ValueError):
            parse_document("amazon", "")
        with pytest.raises(ValueError):
            get_source("amazon")

    def test_source_url_override(self):
        http = MagicMock()
        http.get_text.return_value = "7 - Hračky"

        source = get_source("google", http, url="http://localhost/taxonomy.txt")
        categories = source.fetch()

        http.get_text.assert_called_once_with("http://localhost/taxonomy.txt")
        assert categories[0].id == 7
