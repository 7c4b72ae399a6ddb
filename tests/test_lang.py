from lang import get_text, load_language


def test_default_pack_has_play_and_support_text():
    lang = load_language("en")

    assert get_text(lang, "play.embed.noResults") == "No results found for your query."
    assert get_text(lang, "support.embed.authorName") == "Support Server"


def test_overlay_pack_falls_back_to_default_keys():
    lang = load_language("ES")

    assert get_text(lang, "play.embed.suggestion") == "Sugerencias"
    assert get_text(lang, "play.selection.cancel") == "Cancel"


def test_unknown_language_uses_default():
    assert load_language("xx") == load_language("en")


def test_placeholders_are_replaced():
    lang = load_language("en")

    text = get_text(lang, "play.selection.title", query="lofi", start=1, end=5)

    assert text == "Search Results for 'lofi' (Results 1-5)"


def test_missing_keys_return_the_key():
    lang = load_language("en")

    assert get_text(lang, "play.embed.doesNotExist") == "play.embed.doesNotExist"
    assert get_text(lang, "play.embed") == "play.embed"
