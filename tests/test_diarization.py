"""Tests for diarized transcript reconstruction."""

import pytest

from carebridge.models.speech import RecognizedWord
from carebridge.services.diarization import (
    _TimedUtterance,
    _merge_short,
    _segment,
    build_utterances,
)


def w(text, tag=None, start=None, end=None):
    return RecognizedWord(text=text, speaker_tag=tag, start_time=start, end_time=end)


def as_pairs(utterances):
    return [(u.speaker, u.transcript) for u in utterances]


def test_empty_input_gives_no_utterances():
    assert build_utterances([]) == []


def test_single_speaker_fully_tagged():
    result = build_utterances([w("hello", 1), w("world", 1)])
    assert as_pairs(result) == [("Speaker 1", "hello world")]


def test_speaker_switch_does_not_merge_across_speakers():
    result = build_utterances([w("hi", 1), w("there", 2)])
    assert as_pairs(result) == [("Speaker 1", "hi"), ("Speaker 2", "there")]


def test_untagged_word_inherits_previous_tag():
    result = build_utterances([w("a", 1), w("b"), w("c", 2)])
    assert as_pairs(result) == [("Speaker 1", "a b"), ("Speaker 2", "c")]


def test_leading_untagged_word_defaults_to_speaker_one():
    assert as_pairs(build_utterances([w("a")])) == [("Speaker 1", "a")]


def test_all_untagged_words_form_one_segment():
    result = build_utterances([w("we"), w("all"), w("agree"), w("today")])
    assert as_pairs(result) == [("Speaker 1", "we all agree today")]


def test_inherited_tag_is_the_most_recent_one():
    words = [w("one", 1), w("two", 2), w("three"), w("four"), w("five", 1)]
    assert as_pairs(build_utterances(words)) == [
        ("Speaker 1", "one"),
        ("Speaker 2", "two three four"),
        ("Speaker 1", "five"),
    ]


def test_three_short_same_speaker_utterances_merge_into_one():
    # Blank words from speaker 2 split speaker 1 into three short segments
    words = [w("a", 1), w(" ", 2), w("b", 1), w("", 2), w("c", 1)]
    assert as_pairs(build_utterances(words)) == [("Speaker 1", "a b c")]


def test_merge_stops_once_combined_utterance_is_long_enough():
    words = [
        w("yes", 1), w(" ", 2),
        w("I", 1), w("see", 1), w("now", 1), w(" ", 2),
        w("ok", 1),
    ]
    assert as_pairs(build_utterances(words)) == [
        ("Speaker 1", "yes I see now"),
        ("Speaker 1", "ok"),
    ]


def test_long_utterance_is_not_merged_forward():
    words = [w("this", 1), w("is", 1), w("long", 1), w("", 2), w("ok", 1)]
    assert as_pairs(build_utterances(words)) == [
        ("Speaker 1", "this is long"),
        ("Speaker 1", "ok"),
    ]


def test_whitespace_only_segment_is_dropped():
    words = [w("hello", 1), w("there", 1), w("friend", 1), w("  ", 2), w("", 2), w("bye", 3)]
    assert as_pairs(build_utterances(words)) == [
        ("Speaker 1", "hello there friend"),
        ("Speaker 3", "bye"),
    ]


def test_transcripts_have_single_spaces_only():
    words = [w(" good ", 1), w(""), w("morning ", 1), w("  doctor", 1)]
    result = build_utterances(words)
    assert as_pairs(result) == [("Speaker 1", "good morning doctor")]
    for utterance in result:
        assert utterance.transcript == utterance.transcript.strip()
        assert "  " not in utterance.transcript


def test_speaker_tag_is_coerced_to_int():
    word = RecognizedWord.model_validate({"word": "hi", "speakerTag": "2"})
    assert as_pairs(build_utterances([word])) == [("Speaker 2", "hi")]


def test_output_has_only_speaker_and_transcript():
    result = build_utterances([w("hello", 1, start="0s", end="0.5s")])
    assert result[0].model_dump() == {"speaker": "Speaker 1", "transcript": "hello"}


@pytest.mark.parametrize(
    "words",
    [
        [w("a", 1), w("b", 2), w("c", 1), w("d", 2)],
        [w("x"), w("y", 3), w(""), w("z", 3), w(" ", 4), w("q", 3)],
        [w("one", 2), w("two", 2), w("three", 1), w("four"), w("five", 2), w("six", 1)],
    ],
)
def test_every_non_blank_word_appears_exactly_once_in_order(words):
    result = build_utterances(words)
    output_tokens = " ".join(u.transcript for u in result).split()
    expected = [word.text.strip() for word in words if word.text.strip()]
    assert output_tokens == expected
    assert all(u.transcript for u in result)


def test_segment_keeps_first_start_and_latest_end():
    segments = _segment([
        w("hello", 1, start="0s", end="0.4s"),
        w("there", 1, start="0.5s"),
        w("you", 1, start="0.9s", end="1.2s"),
    ])
    assert len(segments) == 1
    assert segments[0].start_time == "0s"
    assert segments[0].end_time == "1.2s"


def test_merge_propagates_start_time_only_when_missing():
    merged = _merge_short([
        _TimedUtterance("Speaker 1", "a", start_time="1s", end_time="2s"),
        _TimedUtterance("Speaker 1", "b", start_time=None, end_time="4s"),
        _TimedUtterance("Speaker 1", "c", start_time="5s", end_time="6s"),
    ])
    assert len(merged) == 1
    assert merged[0].transcript == "a b c"
    # "a b" took the 1s start, but "c" already had its own
    assert merged[0].start_time == "5s"
    assert merged[0].end_time == "6s"


def test_merge_does_not_mutate_input():
    original = [
        _TimedUtterance("Speaker 1", "a"),
        _TimedUtterance("Speaker 1", "b"),
    ]
    _merge_short(original)
    assert [u.transcript for u in original] == ["a", "b"]
