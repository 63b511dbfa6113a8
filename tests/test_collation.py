import pytest

from alertsmap.collation import PRIMARY, TERTIARY, collation_key, sort_by_locale


def test_ukrainian_dictionary_order():
    names = ["Івано-Франківська область", "Київська область", "Вінницька область", "Київ"]
    sort_by_locale(names, key=lambda name: name, locale="uk")
    assert names == ["Вінницька область", "Івано-Франківська область", "Київ", "Київська область"]


def test_ukrainian_letters_after_their_russian_neighbours():
    names = ["Кіровоградська", "Київ", "Луганська", "Львівська", "Чернігівська", "Чернівецька"]
    sort_by_locale(names, key=str)
    assert names == ["Київ", "Кіровоградська", "Луганська", "Львівська", "Чернівецька", "Чернігівська"]


def test_sort_is_in_place_and_uses_key():
    items = [("b", 1), ("a", 2), ("c", 3)]
    same = items
    sort_by_locale(items, key=lambda item: item[0], locale="en")
    assert same is items
    assert [value for _, value in items] == [2, 1, 3]


def test_secondary_strength_ignores_case_and_keeps_input_order():
    items = ["kyiv", "Kyiv", "KYIV"]
    sort_by_locale(items, key=str, locale="en")
    assert items == ["kyiv", "Kyiv", "KYIV"]


def test_secondary_strength_distinguishes_accents():
    assert collation_key("resume", "en") < collation_key("résumé", "en")
    assert collation_key("resume", "en", strength=PRIMARY) == collation_key("résumé", "en", strength=PRIMARY)


def test_tertiary_strength_distinguishes_case():
    assert collation_key("kyiv", "en") == collation_key("Kyiv", "en")
    assert collation_key("kyiv", "en", strength=TERTIARY) != collation_key("Kyiv", "en", strength=TERTIARY)


def test_locale_variants_are_accepted():
    assert collation_key("Київ", "uk_UA") == collation_key("Київ", "uk")
    assert collation_key("Kyiv", "en-US") == collation_key("Kyiv", "en")


def test_unsupported_locale_is_rejected():
    names = ["b", "a"]
    with pytest.raises(ValueError, match="Unsupported collation locale"):
        sort_by_locale(names, key=str, locale="de")
    assert names == ["b", "a"]


def test_unsupported_strength_is_rejected():
    with pytest.raises(ValueError):
        collation_key("Київ", strength=5)
