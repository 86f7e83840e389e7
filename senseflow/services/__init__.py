"""Services package."""

from senseflow.services.speech import (
    RecognitionResult,
    ScriptedSpeechRecognizer,
    SpeechRecognitionError,
    SpeechRecognizerInterface,
    TranscriptSpeechRecognizer,
)

__all__ = [
    # Speech services
    "RecognitionResult",
    "ScriptedSpeechRecognizer",
    "SpeechRecognitionError",
    "SpeechRecognizerInterface",
    "TranscriptSpeechRecognizer",
]
