from wikiart_catalog.utils import decode_title, normalize_title, safe_filename_part


def test_straight_and_curly_apostrophes_share_a_key() -> None:
    assert normalize_title("Women's Bath") == normalize_title("Women’s Bath")
    assert normalize_title("Women‘s Bath") == "Women's Bath"


def test_character_references_are_decoded() -> None:
    assert normalize_title("Women&#39;s Bath") == "Women's Bath"
    assert normalize_title("Women&rsquo;s Bath") == "Women's Bath"
    assert normalize_title("Women&#x2019;s Bath") == "Women's Bath"
    assert normalize_title("Women&amp;#39;s Bath") == "Women's Bath"


def test_curly_double_quotes_collapse() -> None:
    assert normalize_title("“La Japonaise”") == normalize_title('"La Japonaise"')


def test_whitespace_is_trimmed() -> None:
    assert normalize_title("  Water   Lilies \n") == "Water Lilies"
    assert normalize_title("Water&nbsp;Lilies") == "Water Lilies"


def test_display_title_keeps_original_apostrophe() -> None:
    assert decode_title("Women&rsquo;s Bath ") == "Women’s Bath"


def test_normalization_is_stable() -> None:
    title = "Café &amp; Women’s “Bath”"
    assert normalize_title(title) == normalize_title(title)
    assert normalize_title(normalize_title(title)) == normalize_title(title)


def test_safe_filename_part_removes_separators() -> None:
    assert safe_filename_part("Study 1/2") == "Study 1-2"
    assert safe_filename_part("Plain") == "Plain"
