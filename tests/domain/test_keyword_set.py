from intelcrawl.domain.keyword_set import KeywordSet


def test_dedupes_case_insensitively_and_keeps_first_spelling():
    ks = KeywordSet(["Singapore", "singapore", "  SINGAPORE ", "Lee  Kuan Yew"])
    assert ks.terms == ("Singapore", "Lee Kuan Yew")


def test_blank_terms_are_dropped():
    ks = KeywordSet(["", "   ", None, "capital"])
    assert list(ks) == ["capital"]
    assert len(ks) == 1


def test_phrases_and_words_split_in_order():
    ks = KeywordSet(["venture capital", "capital", "Lee Kuan Yew", "fund"])
    assert ks.phrases == ("venture capital", "Lee Kuan Yew")
    assert ks.words == ("capital", "fund")


def test_empty_set_is_falsy():
    assert not KeywordSet([])
    assert not KeywordSet(["  "])
