"""Tests for term normalization."""

from nutrition_enricher.services.normalizer import TermNormalizer


def test_normalize_translates_known_terms() -> None:
    normalizer = TermNormalizer()

    assert normalizer.normalize("arroz") == "rice"
    assert normalizer.normalize("Frango") == "chicken"


def test_normalize_prefers_longest_key() -> None:
    normalizer = TermNormalizer()

    assert normalizer.normalize("batata doce") == "sweet potato"
    assert normalizer.normalize("batata frita") == "french fries"
    assert normalizer.normalize("batata") == "potato"


def test_normalize_keeps_canonical_and_unknown_terms() -> None:
    normalizer = TermNormalizer()

    assert normalizer.normalize("rice") == "rice"
    assert normalizer.normalize("pizza") == "pizza"
    assert normalizer.normalize("quinoa") == "quinoa"
    assert normalizer.normalize("") == ""
    assert normalizer.normalize("   ") == "   "


def test_normalize_with_custom_mapping() -> None:
    normalizer = TermNormalizer.from_mapping(
        {"Maçã": "apple", "maçã verde": "green apple"}
    )

    assert normalizer.normalize("maçã verde fresca") == "green apple"
    assert normalizer.normalize("maçã") == "apple"
    assert normalizer.normalize("apple") == "apple"


def test_variants_are_lowercased_and_unique() -> None:
    normalizer = TermNormalizer()

    assert normalizer.variants("Arroz") == ["arroz", "rice"]
    assert normalizer.variants("Rice") == ["rice"]
    assert normalizer.variants(" ") == []


def test_normalize_meal_and_cheese_phrases() -> None:
    normalizer = TermNormalizer()

    assert normalizer.normalize("rodizio") == "all you can eat"
    assert normalizer.normalize("bobó") == "cassava stew"
    assert normalizer.normalize("self service") == "buffet"
    assert normalizer.normalize("pizza 4 queijo") == "4 cheese pizza"
    assert normalizer.normalize("queijo gorgonzola") == "gorgonzola cheese"
    assert normalizer.normalize("queijo em fatias") == "sliced cheese"
    assert normalizer.normalize("doce de leite condensado") == "condensed milk"
