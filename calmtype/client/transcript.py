"""Keystroke-driven transcript: letters build words, Space commits, Enter saves."""
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Protocol

import httpx

from calmtype.client.api import ApiClientError, CalmTypeClient
from calmtype.client.effects import Viewport
from calmtype.client.events import KeyEvent
from calmtype.services.common import word_count
from calmtype.services.correction import SOURCE_LOCAL, Correction, local_correction

logger = logging.getLogger(__name__)

LETTER_RE = re.compile(r"^[A-Za-z]$")

RECENT_WORDS = 15
RECENT_SENTENCES = 5
LOCAL_HISTORY_LIMIT = 100
PASSAGE_TITLE_LENGTH = 50


class WordCorrector(Protocol):
    async def correct(self, word: str) -> Correction: ...


class SentenceSink(Protocol):
    async def submit(self, sentence: str) -> Any: ...


@dataclass
class HistoryEntry:
    text: str
    timestamp: str
    word_count: int

    @classmethod
    def from_sentence(cls, sentence: str, now: datetime | None = None):
        now = now or datetime.now(timezone.utc)
        return cls(
            text=sentence,
            timestamp=now.isoformat().replace("+00:00", "Z"),
            word_count=word_count(sentence),
        )

    def to_payload(self) -> dict[str, Any]:
        return {"text": self.text, "timestamp": self.timestamp, "wordCount": self.word_count}


@dataclass(frozen=True)
class HistoryView:
    words: list[str]
    sentences: list[str]


class LocalHistoryStore:
    """JSON file of history entries, trimmed to the newest `limit`.

    Read and write failures are logged and swallowed; local history is a
    fallback and must never break typing.
    """

    def __init__(self, path: str | Path, limit: int = LOCAL_HISTORY_LIMIT):
        self.path = Path(path)
        self.limit = limit

    def load(self) -> list[dict[str, Any]]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError:
            logger.exception("Error reading local history %s", self.path)
            return []
        try:
            entries = json.loads(raw or "[]")
        except ValueError:
            logger.error("Local history %s is not valid JSON, ignoring it", self.path)
            return []
        return entries if isinstance(entries, list) else []

    def append(self, entry: HistoryEntry) -> bool:
        entries = self.load()
        entries.append(entry.to_payload())
        if len(entries) > self.limit:
            entries = entries[-self.limit :]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(entries, ensure_ascii=False), encoding="utf-8")
        except OSError:
            logger.exception("Error saving to local history %s", self.path)
            return False
        logger.debug("History saved to local storage")
        return True


def passage_title(sentence: str) -> str:
    title = sentence.strip()
    if len(title) > PASSAGE_TITLE_LENGTH:
        title = title[: PASSAGE_TITLE_LENGTH - 3].rstrip() + "..."
    return title


class CloudHistorySink:
    """Saves finished sentences for the signed-in user or guest, locally otherwise."""

    def __init__(self, client: CalmTypeClient, local: LocalHistoryStore, save_passages: bool = False):
        self.client = client
        self.local = local
        self.save_passages = save_passages

    async def submit(self, sentence: str) -> str:
        """Returns where the entry landed: "cloud" or "local"."""
        entry = HistoryEntry.from_sentence(sentence)
        if self.client.scope is None:
            logger.info("No authentication found, saving locally only")
            self.local.append(entry)
            return "local"
        try:
            await self.client.save_history(entry.to_payload())
        except (ApiClientError, httpx.HTTPError) as exc:
            logger.warning("Error saving history to cloud, falling back to local history: %s", exc)
            self.local.append(entry)
            return "local"
        if self.save_passages:
            try:
                await self.client.save_passage(passage_title(sentence), sentence)
            except (ApiClientError, httpx.HTTPError) as exc:
                logger.warning("Error saving passage to cloud: %s", exc)
        return "cloud"

    async def load(self) -> list[dict[str, Any]]:
        """Cloud history when signed in, the local file otherwise.

        A failed cloud read yields an empty list rather than another
        person's local history.
        """
        if self.client.scope is None:
            return self.local.load()
        try:
            return await self.client.get_history()
        except (ApiClientError, httpx.HTTPError) as exc:
            logger.error("Error loading user history: %s", exc)
            return []


class RemoteCorrector:
    """Correct words through the server, falling back to the local dictionary."""

    def __init__(self, client: CalmTypeClient):
        self.client = client

    async def correct(self, word: str) -> Correction:
        try:
            data = await self.client.correct(word)
            return Correction(data["original"], data["corrected"], data["source"])
        except (ApiClientError, httpx.HTTPError, KeyError) as exc:
            logger.info("Remote correction failed, using local dictionary: %s", exc)
            return Correction(word, local_correction(word), SOURCE_LOCAL)


@dataclass
class TranscriptController:
    corrector: WordCorrector
    sink: SentenceSink | None = None
    effects: Any = None
    on_sentence: Callable[[str], None] | None = None
    viewport: Viewport = field(default_factory=lambda: Viewport(1280, 720))

    current_text: str = ""
    current_sentence: list[str] = field(default_factory=list)
    typed_letters: list[str] = field(default_factory=list)
    typed_words: list[str] = field(default_factory=list)
    typed_sentences: list[str] = field(default_factory=list)
    history_visible: bool = False

    async def handle_key(self, event: KeyEvent) -> None:
        key = event.key
        if key == "Tab":
            self.toggle_history()
        elif key == "Escape":
            self.history_visible = False
        elif key == "Enter":
            await self.handle_enter()
        elif key == "Backspace":
            self.handle_backspace()
        elif key == " ":
            await self.handle_space()
        elif LETTER_RE.match(key):
            self.handle_letter(key)

        if self.effects is not None:
            self.effects.on_keydown(event, self.viewport)

    def handle_letter(self, letter: str) -> None:
        self.current_text += letter
        self.typed_letters.append(letter)

    def handle_backspace(self) -> None:
        if not self.current_text:
            return
        self.current_text = self.current_text[:-1]
        if self.typed_letters:
            self.typed_letters.pop()

    async def handle_space(self) -> None:
        if self.current_text.strip():
            await self._commit_word()

    async def handle_enter(self) -> None:
        if not self.current_sentence and not self.current_text.strip():
            return
        try:
            if self.current_text.strip():
                await self._commit_word()
            sentence = " ".join(self.current_sentence)
            if sentence.strip():
                self.typed_sentences.append(sentence)
                if self.on_sentence is not None:
                    self.on_sentence(sentence)
                if self.sink is not None:
                    await self.sink.submit(sentence)
        finally:
            self.current_text = ""
            self.current_sentence = []

    async def _commit_word(self) -> None:
        correction = await self.corrector.correct(self.current_text.strip())
        self.current_sentence.append(correction.corrected)
        self.typed_words.append(correction.corrected)
        self.current_text = ""

    def toggle_history(self) -> None:
        self.history_visible = not self.history_visible

    def history_view(self) -> HistoryView:
        return HistoryView(
            words=self.typed_words[-RECENT_WORDS:],
            sentences=self.typed_sentences[-RECENT_SENTENCES:],
        )
