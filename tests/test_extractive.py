from articlearc.summarizer.extractive import extract, split_sentences


def test_extract_picks_qualifying_sentences():
    text = (
        "Short. This is a sufficiently long sentence for extraction. "
        "Another qualifying sentence here now."
    )
    assert extract(text) == (
        "This is a sufficiently long sentence for extraction. "
        "Another qualifying sentence here now."
    )


def test_extract_is_deterministic():
    text = "Markets rallied strongly on Monday morning! Analysts were surprised?? " * 5
    assert extract(text) == extract(text)


def test_extract_takes_at_most_three_sentences():
    sentences = [f"Sentence number {i} is long enough to qualify." for i in range(5)]
    summary = extract(" ".join(sentences))
    assert summary == " ".join(sentences[:3])


def test_extract_truncates_long_output():
    sentence = "word " * 80 + "end."
    summary = extract(sentence)
    assert len(summary) == 300
    assert summary.endswith("...")


def test_extract_falls_back_to_text_head():
    assert extract("Tiny. Bits. Only.") == "Tiny. Bits. Only."

    long_fragments = "Hi. " * 60
    summary = extract(long_fragments)
    assert summary == long_fragments[:150] + "..."


def test_extract_non_empty_for_non_empty_input():
    for text in ["x", "   ", "?!", "No terminator but long enough to count as one"]:
        assert extract(text)


def test_split_sentences_normalises_terminator_runs():
    assert split_sentences("Really?! Yes... ok") == ["Really.", "Yes.", "ok"]
