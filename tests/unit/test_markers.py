from engines.markers import CompletionToken, PlainText, ScoreToken, parse_reply, tokenize


def test_score_marker_is_stripped():
    parsed = parse_reply("Good answer. SCORE|7/10")
    assert parsed.display_text == "Good answer."
    assert parsed.score.value == 7
    assert parsed.completion is None


def test_tokens_keep_reply_order():
    tokens = tokenize("Nice. SCORE|5/10 Next: what is a hash map?")
    assert [type(t) for t in tokens] == [PlainText, ScoreToken, PlainText]
    assert tokens[0].text == "Nice. "
    assert tokens[2].text == " Next: what is a hash map?"


def test_score_is_clamped_to_ten():
    assert parse_reply("SCORE|15/10").score.value == 10


def test_malformed_markers_stay_text():
    parsed = parse_reply("Hmm SCORE|abc/10 and SCORE|123/10")
    assert parsed.score is None
    assert parsed.display_text == "Hmm SCORE|abc/10 and SCORE|123/10"


def test_completion_marker():
    parsed = parse_reply("Thanks for your time! INTERVIEW_COMPLETE|7.5/10|true")
    assert parsed.display_text == "Thanks for your time!"
    assert isinstance(parsed.completion, CompletionToken)
    assert parsed.completion.score == 7.5
    assert parsed.completion.passed is True
    assert parse_reply("Bye INTERVIEW_COMPLETE|3/10|False").completion.passed is False


def test_first_score_wins():
    parsed = parse_reply("SCORE|4/10 then SCORE|9/10")
    assert parsed.score.value == 4
    assert parsed.display_text == "then"


def test_non_string_reply():
    assert tokenize(None) == []
    parsed = parse_reply(42)
    assert parsed.display_text == ""
    assert parsed.score is None
