"""Tests for the speech recognizers."""

import asyncio

import pytest

from senseflow.services.speech import (
    RecognitionResult,
    ScriptedSpeechRecognizer,
    SpeechRecognitionError,
    TranscriptSpeechRecognizer,
)


def recognize(recognizer):
    return asyncio.run(recognizer.recognize(prompt="Speak now"))


class TestRecognitionResult:
    """Tests for RecognitionResult."""

    def test_top_transcript(self):
        """Test the first alternative is the transcript used."""
        assert RecognitionResult.heard("a", "b").top_transcript == "a"

    def test_top_transcript_empty(self):
        """Test no alternatives reads as an empty transcript."""
        assert RecognitionResult(completed=True).top_transcript == ""

    def test_cancelled(self):
        """Test a cancelled result carries no transcripts."""
        result = RecognitionResult.cancelled()
        assert result.completed is False
        assert result.transcripts == []


class TestScriptedSpeechRecognizer:
    """Tests for ScriptedSpeechRecognizer."""

    def test_replays_in_order(self):
        """Test queued utterances are replayed one per request."""
        recognizer = ScriptedSpeechRecognizer(["deposit 1", None])
        recognizer.queue("withdraw 2")

        assert recognize(recognizer).top_transcript == "deposit 1"
        assert recognize(recognizer).completed is False
        assert recognize(recognizer).top_transcript == "withdraw 2"
        assert recognizer.remaining == 0
        assert recognizer.prompts == ["Speak now"] * 3

    def test_exhausted_raises(self):
        """Test an empty script raises SpeechRecognitionError."""
        recognizer = ScriptedSpeechRecognizer()
        with pytest.raises(SpeechRecognitionError) as exc_info:
            recognize(recognizer)
        assert exc_info.value.recognizer == "scripted"


class TestTranscriptSpeechRecognizer:
    """Tests for TranscriptSpeechRecognizer."""

    def test_transcript_is_heard(self):
        """Test a typed transcript is returned trimmed."""
        result = recognize(TranscriptSpeechRecognizer("  withdraw 50 "))
        assert result.completed is True
        assert result.transcripts == ["withdraw 50"]

    @pytest.mark.parametrize("transcript", [None, "", "   "])
    def test_blank_is_dismissed(self, transcript):
        """Test a blank transcript counts as a dismissed recognizer."""
        assert recognize(TranscriptSpeechRecognizer(transcript)).completed is False
