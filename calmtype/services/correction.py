"""Word auto-correction: DeepSeek chat completion with a local dictionary fallback."""
import logging
from dataclasses import dataclass

import httpx

from calmtype.core.config import Settings

logger = logging.getLogger(__name__)

SOURCE_LLM = "llm"
SOURCE_LOCAL = "local"

PLACEHOLDER_API_KEY = "YOUR_DEEPSEEK_API_KEY"

CORRECTION_PROMPT = """Analyze this word: "{word}".
1. If it's a curse word, profanity, or inappropriate language, replace it with a cute kaomoji (like (╯°□°）╯︵ ┻━┻ or (╯︵╰,) or ٩(◕‿◕)۶)
2. If it's a misspelled normal word, correct it to proper English
3. If it's already correct, return it unchanged
Return only the result, nothing else."""

TABLE_FLIP = "(╯°□°）╯︵ ┻━┻"
SOB = "(╯︵╰,)"
CHEER = "٩(◕‿◕)۶"

KAOMOJI = {
    "shit": TABLE_FLIP,
    "fuck": SOB,
    "damn": CHEER,
    "hell": TABLE_FLIP,
    "bitch": TABLE_FLIP,
    "ass": TABLE_FLIP,
    "crap": SOB,
    "piss": CHEER,
    "dick": TABLE_FLIP,
    "cock": SOB,
    "pussy": CHEER,
    "fag": TABLE_FLIP,
    "gay": SOB,
    "retard": CHEER,
    "stupid": TABLE_FLIP,
    "idiot": SOB,
    "moron": CHEER,
    "bastard": TABLE_FLIP,
    "whore": SOB,
    "slut": CHEER,
    "fucking": SOB,
    "shitty": CHEER,
    "damned": TABLE_FLIP,
    "hellish": SOB,
    "cursed": CHEER,
    "fucked": TABLE_FLIP,
    "shitted": SOB,
    "damning": CHEER,
}

COMMON_WORDS = frozenset(
    """
    the and for are but not you all can had her was one our out day get has him his how
    its may new now old see two way who boy did man men put say she too use want been
    call come does each find give good have here just know like long look make many more
    most much name need only over part place right said same seem should small still such
    take than them there these they this time very well were what when where which while
    will with work would write your about after again before below between during except
    inside outside through under within without
    """.split()
)

MISSPELLINGS = {
    "teh": "the",
    "adn": "and",
    "taht": "that",
    "recieve": "receive",
    "seperate": "separate",
    "occured": "occurred",
    "definately": "definitely",
    "accomodate": "accommodate",
    "begining": "beginning",
    "beleive": "believe",
    "calender": "calendar",
    "cemetary": "cemetery",
    "concious": "conscious",
    "existance": "existence",
    "goverment": "government",
    "independant": "independent",
    "occassion": "occasion",
    "priviledge": "privilege",
    "rythm": "rhythm",
    "thier": "their",
    "untill": "until",
    "wich": "which",
    "writting": "writing",
    "youself": "yourself",
    "acheive": "achieve",
    "becuase": "because",
    "comming": "coming",
    "differnt": "different",
    "enviroment": "environment",
    "finnally": "finally",
    "frend": "friend",
    "grate": "great",
    "happend": "happened",
    "immediatly": "immediately",
    "knowlege": "knowledge",
    "lenght": "length",
    "mispell": "misspell",
    "neccessary": "necessary",
    "publically": "publicly",
    "succesful": "successful",
}


@dataclass(frozen=True)
class Correction:
    original: str
    corrected: str
    source: str


class CorrectionServiceError(Exception):
    """The remote correction API failed or answered with something unusable."""


def kaomoji_for(word: str) -> str | None:
    return KAOMOJI.get(word.lower())


def local_correction(word: str) -> str:
    """Profanity -> kaomoji, common words unchanged, known misspellings fixed."""
    kaomoji = kaomoji_for(word)
    if kaomoji:
        return kaomoji
    lowered = word.lower()
    if lowered in COMMON_WORDS:
        return word
    return MISSPELLINGS.get(lowered, word)


class DeepSeekClient:
    """Minimal OpenAI-compatible chat-completions caller."""

    def __init__(
        self,
        api_key: str,
        api_url: str,
        model: str = "deepseek-chat",
        max_tokens: int = 30,
        temperature: float = 0.3,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self._transport = transport

    async def correct(self, word: str) -> str:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": CORRECTION_PROMPT.format(word=word)}],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise CorrectionServiceError(f"API request failed: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise CorrectionServiceError(f"API request failed: {exc}") from exc
        except ValueError as exc:
            raise CorrectionServiceError("API returned invalid JSON") from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise CorrectionServiceError("API response has no completion") from exc
        corrected = (content or "").strip()
        return corrected or word


class AutoCorrector:
    """Correct one word, remotely when configured, locally otherwise."""

    def __init__(self, remote: DeepSeekClient | None = None):
        self.remote = remote

    @classmethod
    def from_settings(cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        key = settings.deepseek_api_key
        if not key or key == PLACEHOLDER_API_KEY:
            return cls(remote=None)
        return cls(
            remote=DeepSeekClient(
                api_key=key,
                api_url=settings.deepseek_api_url,
                model=settings.deepseek_model,
                max_tokens=settings.correction_max_tokens,
                temperature=settings.correction_temperature,
                timeout=settings.correction_timeout_seconds,
                transport=transport,
            )
        )

    async def correct(self, word: str) -> Correction:
        if self.remote is None:
            return Correction(word, local_correction(word), SOURCE_LOCAL)
        try:
            corrected = await self.remote.correct(word)
        except CorrectionServiceError as exc:
            logger.info("DeepSeek correction failed, using local dictionary: %s", exc)
            return Correction(word, local_correction(word), SOURCE_LOCAL)
        return Correction(word, corrected, SOURCE_LLM)
