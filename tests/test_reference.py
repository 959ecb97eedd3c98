import pytest

from reference import NotationCatalog, VocabularyGuide, get_notation_catalog, get_vocabulary_guide


@pytest.fixture(scope="module")
def catalog():
    return NotationCatalog.from_file()


@pytest.fixture(scope="module")
def guide():
    return VocabularyGuide.from_file()


def test_catalog_loads_bundled_table(catalog):
    assert len(catalog.entries) == 14
    entry = catalog.get("inverse-function")
    assert entry.notation == "f^{-1}(x)"
    assert entry.ap_unit == 2
    assert entry.model_dump(by_alias=True)["confusedWith"] == r"\frac{1}{f(x)}"


def test_catalog_get_unknown_id(catalog):
    assert catalog.get("nope") is None


def test_search_matches_notation_meaning_or_category(catalog):
    assert [e.id for e in catalog.search("log")] == ["logarithm-base", "natural-log"]
    assert [e.id for e in catalog.search("INVERSE FUNCTION")] == ["inverse-function"]
    assert len(catalog.search("")) == 14


def test_search_results_are_an_ordered_subset(catalog):
    all_ids = [e.id for e in catalog.entries]
    results = [e.id for e in catalog.search("x")]

    assert results == [i for i in all_ids if i in results]


def test_category_filter_is_exact(catalog):
    results = catalog.search(category="trigonometry")
    assert [e.id for e in results] == ["sine-squared", "inverse-sine", "radian-pi"]
    assert catalog.search(category="trig") == []


def test_categories_in_first_seen_order(catalog):
    assert catalog.categories() == [
        "functions", "algebra", "trigonometry", "exponential",
        "logarithmic", "calculus", "sequences", "polar",
    ]


def test_vocabulary_flattens_categories(guide):
    entries = guide.entries
    assert len(entries) == 11
    assert entries[0].term == "Domain"
    assert entries[0].category_key == "functions"
    assert entries[0].category_name == "Functions"


def test_vocabulary_search_and_category(guide):
    results = guide.search("asymptote")
    assert [e.term for e in results] == ["Asymptote", "End behavior"]
    assert {e.category_key for e in results} == {"calculus"}

    sequences = guide.search(category="sequences")
    assert [e.term for e in sequences] == ["Common difference", "Common ratio"]


def test_vocabulary_search_matches_related_terms(guide):
    assert "Domain" in [e.term for e in guide.search("interval notation")]


def test_vocabulary_categories(guide):
    categories = guide.categories()
    assert list(categories) == ["functions", "trigonometry", "exponential", "calculus", "sequences"]
    assert categories["exponential"] == "Exponential and Logarithmic"


def test_process_wide_instances_are_cached():
    assert get_notation_catalog() is get_notation_catalog()
    assert get_vocabulary_guide() is get_vocabulary_guide()
