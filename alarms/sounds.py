from __future__ import annotations

import logging
import sys
from threading import Event, Lock, Thread
from typing import Optional, TextIO

try:
    import winsound
except ImportError:  # pragma: no cover - non-Windows fallback
    winsound = None  # type: ignore

try:  # Optional local TTS for spoken alarms
    import pyttsx3
except ImportError:  # pragma: no cover - optional
    pyttsx3 = None  # type: ignore

logger = logging.getLogger(__name__)


class AlarmBell:
    """Rings until stopped: winsound beeps on Windows, the terminal bell elsewhere."""

    def __init__(self, stream: Optional[TextIO] = None, interval: float = 1.0, freq: int = 880):
        self.stream = stream or sys.stdout
        self.interval = interval
        self.freq = freq
        self._stop_event = Event()
        self._thread: Optional[Thread] = None

    @property
    def ringing(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start_loop(self) -> None:
        self._stop_event.clear()
        if self._thread and self._thread.is_alive():
            return
        self._thread = Thread(target=self._ring_loop, name="alarm-bell", daemon=True)
        self._thread.start()

    def stop_loop(self) -> None:
        self._stop_event.set()

    def _ring_loop(self) -> None:  # pragma: no cover - timing loop
        while not self._stop_event.is_set():
            self._ring_once()
            self._stop_event.wait(self.interval)

    def _ring_once(self) -> None:
        if winsound:
            try:
                winsound.Beep(self.freq, 250)
                return
            except RuntimeError:
                logger.debug("winsound.Beep failed, falling back to terminal bell")
        self.stream.write("\a")
        self.stream.flush()


class LocalSpeaker:
    """Offline TTS wrapper around pyttsx3; silently unavailable when it is not installed."""

    def __init__(self, rate: int = 185):
        self._engine = pyttsx3.init() if pyttsx3 else None
        self._lock = Lock()
        if self._engine:
            try:
                self._engine.setProperty("rate", rate)
            except Exception:
                logger.debug("Failed to set pyttsx3 rate")

    @property
    def available(self) -> bool:
        return self._engine is not None

    def speak_async(self, text: str) -> bool:
        if not self._engine:
            return False
        Thread(target=self._speak, args=(text,), name="alarm-speech", daemon=True).start()
        return True

    def _speak(self, text: str) -> None:
        if not self._engine:
            return
        with self._lock:
            try:
                self._engine.say(text)
                self._engine.runAndWait()
            except Exception:  # pragma: no cover - engine runtime errors
                logger.error("pyttsx3 failed to speak text", exc_info=True)
