"""
Voice Assistant

Wraps host speech capabilities behind two small protocols and runs a
single-slot recognition session:

    IDLE --start_listening--> LISTENING --result/error/stop--> IDLE

The host adapter supplies a SpeechRecognizer and (optionally) a
SpeechSynthesizer. Recognizer callbacks are expected on the event loop
thread.
"""

import asyncio
import logging
from typing import Callable, Optional, Protocol, Union

from bizvoice.errors import RecognitionFailure, SessionBusyError, UnsupportedCapabilityError
from bizvoice.models.common import Language, ListeningState
from bizvoice.models.voice import VoiceCommand
from bizvoice.services.command_grammar import parse_command

logger = logging.getLogger(__name__)

LOCALES = {
    Language.ENGLISH: "en-US",
    Language.HINDI: "hi-IN",
    Language.MARATHI: "mr-IN",
}


class SpeechRecognizer(Protocol):
    """Host speech-to-text capability (single utterance per start)."""

    def start(
        self,
        locale: str,
        on_result: Callable[[str], None],
        on_error: Callable[[str], None],
    ) -> None:
        ...

    def stop(self) -> None:
        ...


class SpeechSynthesizer(Protocol):
    """Host text-to-speech capability."""

    def speak(self, text: str, locale: str) -> None:
        ...


class VoiceAssistant:
    """Recognition session plus command parsing and speech output."""

    def __init__(
        self,
        recognizer: Optional[SpeechRecognizer] = None,
        synthesizer: Optional[SpeechSynthesizer] = None,
        default_language: Union[Language, str] = Language.ENGLISH,
    ):
        self.recognizer = recognizer
        self.synthesizer = synthesizer
        self.default_language = Language(default_language)
        self._state = ListeningState.IDLE
        self._pending: Optional["asyncio.Future[str]"] = None

    @property
    def state(self) -> ListeningState:
        return self._state

    @property
    def is_listening(self) -> bool:
        return self._state == ListeningState.LISTENING

    def is_supported(self) -> bool:
        """Whether speech recognition is available."""
        return self.recognizer is not None

    # =========================================================================
    # Recognition session
    # =========================================================================

    def start_listening(self, language: Optional[Union[Language, str]] = None) -> "asyncio.Future[str]":
        """
        Start capturing one utterance.

        Must be called with a running event loop. The returned future
        resolves with the transcript, fails with RecognitionFailure, or
        is cancelled by stop_listening().

        Raises:
            UnsupportedCapabilityError: no recognizer available
            SessionBusyError: a session is already listening
        """
        if self.recognizer is None:
            raise UnsupportedCapabilityError("Speech recognition")
        if self._state == ListeningState.LISTENING:
            raise SessionBusyError()

        locale = LOCALES[Language(language or self.default_language)]
        future: "asyncio.Future[str]" = asyncio.get_running_loop().create_future()

        def on_result(transcript: str):
            if self._pending is not future or future.done():
                logger.debug("Ignoring result for a finished session")
                return
            self._reset()
            future.set_result(transcript)

        def on_error(error_code: str):
            if self._pending is not future or future.done():
                logger.debug(f"Ignoring error for a finished session: {error_code}")
                return
            self._reset()
            logger.warning(f"Speech recognition failed: {error_code}")
            future.set_exception(RecognitionFailure(error_code))

        self._pending = future
        self._state = ListeningState.LISTENING
        future.add_done_callback(self._on_future_done)

        try:
            self.recognizer.start(locale, on_result, on_error)
        except Exception:
            if self._pending is future:
                self._reset()
            future.cancel()
            raise

        logger.debug(f"Listening ({locale})")
        return future

    def stop_listening(self):
        """Cancel the current session, discarding any in-flight result."""
        if self._state != ListeningState.LISTENING:
            return

        future = self._pending
        self._reset()
        self.recognizer.stop()
        if future is not None and not future.done():
            future.cancel()
        logger.debug("Listening stopped")

    def _reset(self):
        self._pending = None
        self._state = ListeningState.IDLE

    def _on_future_done(self, future: "asyncio.Future[str]"):
        # The caller cancelled the future directly (e.g. a timeout wrapper)
        if self._pending is future:
            self._reset()
            self.recognizer.stop()

    # =========================================================================
    # Commands and speech output
    # =========================================================================

    def parse_command(
        self,
        transcript: str,
        language: Optional[Union[Language, str]] = None,
    ) -> Optional[VoiceCommand]:
        """Extract a command from a transcript; None if nothing matches."""
        return parse_command(transcript, language or self.default_language)

    def speak(self, text: str, language: Optional[Union[Language, str]] = None):
        """Best-effort text-to-speech; never raises."""
        if self.synthesizer is None:
            logger.debug("Speech synthesis not supported - skipping")
            return

        try:
            locale = LOCALES[Language(language or self.default_language)]
        except ValueError:
            locale = LOCALES[self.default_language]

        try:
            self.synthesizer.speak(text, locale)
        except Exception as e:
            logger.warning(f"Speech synthesis failed: {e}")
