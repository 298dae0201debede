"""
Speech recognition models: recognizer words and speaker-attributed utterances
"""

from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field

# Google returns protobuf durations as strings ("1.300s"); other callers may pass seconds
Duration = Union[str, float]


class RecognizedWord(BaseModel):
    """A single word as returned by the speech recognizer"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(default="", alias="word", description="Recognized word text")
    speaker_tag: Optional[int] = Field(default=None, alias="speakerTag", description="Speaker id assigned by diarization")
    start_time: Optional[Duration] = Field(default=None, alias="startTime")
    end_time: Optional[Duration] = Field(default=None, alias="endTime")


class Utterance(BaseModel):
    """A contiguous stretch of transcript attributed to one speaker"""
    speaker: str = Field(description="Speaker label, e.g. 'Speaker 1'")
    transcript: str = Field(description="Non-empty transcript text")
