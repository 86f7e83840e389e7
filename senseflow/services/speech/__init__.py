"""Speech recognition services package."""

from senseflow.services.speech.recognizer import (
    RecognitionResult,
    ScriptedSpeechRecognizer,
    SpeechRecognitionError,
    SpeechRecognizerInterface,
    TranscriptSpeechRecognizer,
)

__all__ = [
    "RecognitionResult",
    "ScriptedSpeechRecognizer",
    "SpeechRecognitionError",
    "SpeechRecognizerInterface",
    "TranscriptSpeechRecognizer",
]
