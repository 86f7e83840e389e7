"""
Speech Recognition Boundary

DESIGN DECISION: Speech-to-text is an external service. The application
only sees a single RecognitionResult per request:

1. A completed flag (the recognizer returned normally, not dismissed)
2. A list of alternative transcripts, best first

A request is awaited once and resolves exactly once. There is no
cancellation, no timeout and no retry: a failed request is reported and
the user presses the voice button again.

Recognizers provided here need no platform service:
- ScriptedSpeechRecognizer replays queued utterances (tests, demos)
- TranscriptSpeechRecognizer wraps a transcript typed into the UI
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, Optional, Union

from pydantic import BaseModel, Field


class SpeechRecognitionError(Exception):
    """The recognizer could not produce a result."""

    def __init__(self, recognizer: str, message: str):
        self.recognizer = recognizer
        super().__init__(message)


class RecognitionResult(BaseModel):
    """Outcome of one recognition request."""

    completed: bool = Field(
        ...,
        description="False when the user dismissed the recognizer"
    )
    transcripts: list[str] = Field(
        default_factory=list,
        description="Alternative transcripts, best first"
    )

    @property
    def top_transcript(self) -> str:
        """Best transcript, or an empty string when there is none."""
        return self.transcripts[0] if self.transcripts else ""

    @classmethod
    def cancelled(cls) -> "RecognitionResult":
        return cls(completed=False)

    @classmethod
    def heard(cls, *transcripts: str) -> "RecognitionResult":
        return cls(completed=True, transcripts=list(transcripts))


class SpeechRecognizerInterface(ABC):
    """
    Abstract interface for speech recognizers.

    Any recognizer (platform service, cloud API, scripted) must implement
    recognize().
    """

    name: str = "speech"

    @abstractmethod
    async def recognize(
        self,
        prompt: str,
        language_model: str = "free_form",
    ) -> RecognitionResult:
        """
        Listen for one utterance.

        Args:
            prompt: Text shown to the user while listening
            language_model: Language model hint for the recognizer

        Returns:
            The recognition result

        Raises:
            SpeechRecognitionError: If recognition fails
        """
        pass


ScriptedUtterance = Union[str, RecognitionResult, None]


class ScriptedSpeechRecognizer(SpeechRecognizerInterface):
    """
    Replays a fixed queue of utterances, one per request.

    A string is heard as a single transcript, None as a dismissed
    recognizer, and a RecognitionResult is returned as is.
    """

    name = "scripted"

    def __init__(self, utterances: Iterable[ScriptedUtterance] = ()):
        self._queue: deque[ScriptedUtterance] = deque(utterances)
        self._prompts: list[str] = []

    @property
    def prompts(self) -> list[str]:
        """Prompts shown so far, in request order."""
        return list(self._prompts)

    @property
    def remaining(self) -> int:
        return len(self._queue)

    def queue(self, utterance: ScriptedUtterance) -> None:
        self._queue.append(utterance)

    async def recognize(
        self,
        prompt: str,
        language_model: str = "free_form",
    ) -> RecognitionResult:
        self._prompts.append(prompt)

        if not self._queue:
            raise SpeechRecognitionError(self.name, "No scripted utterances left")

        utterance = self._queue.popleft()
        if utterance is None:
            return RecognitionResult.cancelled()
        if isinstance(utterance, RecognitionResult):
            return utterance
        return RecognitionResult.heard(utterance)


class TranscriptSpeechRecognizer(SpeechRecognizerInterface):
    """
    Treats text typed by the user as what they said.

    A blank transcript counts as a dismissed recognizer.
    """

    name = "transcript"

    def __init__(self, transcript: Optional[str]):
        self._transcript = transcript

    async def recognize(
        self,
        prompt: str,
        language_model: str = "free_form",
    ) -> RecognitionResult:
        if self._transcript is None or not self._transcript.strip():
            return RecognitionResult.cancelled()
        return RecognitionResult.heard(self._transcript.strip())
