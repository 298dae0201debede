"""
Diarized transcript reconstruction.

Turns the flat, speaker-tagged word list returned by the speech recognizer
into an ordered list of per-speaker utterances.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from carebridge.models.speech import Duration, RecognizedWord, Utterance

DEFAULT_SPEAKER_TAG = 1
MIN_UTTERANCE_TOKENS = 3


@dataclass
class _Segment:
    speaker_tag: int
    words: List[str] = field(default_factory=list)
    start_time: Optional[Duration] = None
    end_time: Optional[Duration] = None

    def add(self, word: RecognizedWord) -> None:
        self.words.append(word.text)
        if word.end_time is not None:
            self.end_time = word.end_time

    def close(self) -> Optional["_TimedUtterance"]:
        text = " ".join(w.strip() for w in self.words if w and w.strip())
        if not text:
            return None
        return _TimedUtterance(
            speaker=speaker_label(self.speaker_tag),
            transcript=text,
            start_time=self.start_time,
            end_time=self.end_time,
        )


@dataclass
class _TimedUtterance:
    speaker: str
    transcript: str
    start_time: Optional[Duration] = None
    end_time: Optional[Duration] = None


def speaker_label(tag: int) -> str:
    return f"Speaker {tag}"


def build_utterances(words: Iterable[RecognizedWord]) -> List[Utterance]:
    """
    Build speaker-attributed utterances from recognizer words.

    Untagged words inherit the most recent tag seen so far (speaker 1 if
    there is none yet). Consecutive words with the same tag form one segment;
    blank segments are dropped. Short utterances are then folded forward
    into the following utterance of the same speaker.
    """
    segments = _segment(words)
    return [
        Utterance(speaker=u.speaker, transcript=u.transcript)
        for u in _merge_short(segments)
    ]


def _segment(words: Iterable[RecognizedWord]) -> List[_TimedUtterance]:
    emitted: List[_TimedUtterance] = []
    current: Optional[_Segment] = None
    last_tag: Optional[int] = None

    for word in words:
        if word.speaker_tag is not None:
            last_tag = int(word.speaker_tag)
        tag = last_tag if last_tag is not None else DEFAULT_SPEAKER_TAG

        if current is None or tag != current.speaker_tag:
            if current is not None:
                closed = current.close()
                if closed:
                    emitted.append(closed)
            current = _Segment(speaker_tag=tag, start_time=word.start_time)
        current.add(word)

    if current is not None:
        closed = current.close()
        if closed:
            emitted.append(closed)
    return emitted


def _merge_short(utterances: List[_TimedUtterance]) -> List[_TimedUtterance]:
    merged: List[_TimedUtterance] = []
    pending = list(utterances)

    for i, current in enumerate(pending):
        nxt = pending[i + 1] if i + 1 < len(pending) else None
        if (
            nxt is not None
            and len(current.transcript.split()) < MIN_UTTERANCE_TOKENS
            and nxt.speaker == current.speaker
        ):
            pending[i + 1] = _TimedUtterance(
                speaker=nxt.speaker,
                transcript=f"{current.transcript} {nxt.transcript}",
                start_time=nxt.start_time if nxt.start_time is not None else current.start_time,
                end_time=nxt.end_time,
            )
            continue
        merged.append(current)
    return merged
