from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml

from storytyper.core.config import DEFAULT_LANGUAGE

logger = logging.getLogger(__name__)

_DEFAULT_DIR = Path(__file__).resolve().parent.parent / "data" / "sentences"


@dataclass(frozen=True)
class Language:
    code: str
    name: str
    sentences: List[str]


class SentenceBank:
    """Per-language sentence collections with uniform random selection.

    Unknown language codes fall back to ``default_language``. Pass ``rng`` to
    make draws deterministic.
    """

    def __init__(
        self,
        languages: Optional[Mapping[str, Language]] = None,
        default_language: str = DEFAULT_LANGUAGE,
        rng: Optional[random.Random] = None,
        base_dir: Optional[Path] = None,
    ) -> None:
        if languages is None:
            languages = self._load_languages(base_dir or _DEFAULT_DIR)
        self._languages: Dict[str, Language] = {}
        for code, language in languages.items():
            items = [s for s in language.sentences if s and s.strip()]
            if not items:
                raise ValueError(f"Language {code!r} has no sentences")
            self._languages[code] = replace(language, sentences=items)
        if default_language not in self._languages:
            raise ValueError(f"Default language {default_language!r} has no sentences")
        self._default_language = default_language
        self._rng = rng or random.Random()

    @classmethod
    def from_sentences(
        cls,
        sentences: Mapping[str, List[str]],
        default_language: str = DEFAULT_LANGUAGE,
        rng: Optional[random.Random] = None,
    ) -> SentenceBank:
        """Build a bank from plain lists, using each code as its display name."""
        languages = {
            code: Language(code=code, name=code, sentences=list(items))
            for code, items in sentences.items()
        }
        return cls(languages, default_language=default_language, rng=rng)

    @property
    def default_language(self) -> str:
        return self._default_language

    def all(self) -> List[Language]:
        return list(self._languages.values())

    def get(self, code: str) -> Language:
        return self._languages[code]

    def has_language(self, code: str) -> bool:
        return code in self._languages

    def resolve(self, code: str) -> str:
        """Return *code* if known, otherwise the default language code."""
        if code in self._languages:
            return code
        logger.info("Unknown language %r, using %r", code, self._default_language)
        return self._default_language

    def pick(self, code: str) -> str:
        """Draw one sentence uniformly at random from *code*'s collection."""
        language = self._languages[self.resolve(code)]
        return self._rng.choice(language.sentences)

    def _load_languages(self, base_dir: Path) -> Dict[str, Language]:
        if not base_dir.exists():
            raise FileNotFoundError(f"Sentences directory not found: {base_dir}")

        languages: Dict[str, Language] = {}
        for path in sorted(base_dir.glob("*.yaml")):
            code = path.stem
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
            if not raw or not isinstance(raw, dict):
                raise ValueError(f"{path.name}: expected YAML with 'name' and 'sentences'")
            name = raw.get("name")
            content = raw.get("sentences")
            if not name or not isinstance(name, str):
                raise ValueError(f"{path.name}: missing or invalid 'name'")
            if content is None:
                raise ValueError(f"{path.name}: missing 'sentences'")
            if not isinstance(content, list):
                raise ValueError(f"{path.name}: 'sentences' must be a list")
            items = [str(item).strip() for item in content if item is not None and str(item).strip()]
            if not items:
                raise ValueError(f"{path.name}: 'sentences' is empty")
            languages[code] = Language(code=code, name=name.strip(), sentences=items)

        if not languages:
            raise ValueError(f"No sentence files (*.yaml) found in {base_dir}")
        return languages
