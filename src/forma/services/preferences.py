"""Persisted user preferences: display language and theme."""

from typing import Any, Literal

from forma.services.storage import MemoryStorage
from forma.services.storage import Storage
from forma.translations import DEFAULT_LANGUAGE
from forma.translations import Language
from forma.translations import detect_language
from forma.translations import is_supported
from forma.translations import translate


LANGUAGE_KEY = 'forma_language'
THEME_KEY = 'forma_theme'

Theme = Literal['light', 'dark']
THEMES: tuple[Theme, ...] = ('light', 'dark')

class LanguagePreference:
    """Current UI language, persisted in the durable store."""

    def __init__(self, storage: Storage, default: Language | None = None):
        self.storage = storage
        stored = storage.get(LANGUAGE_KEY)
        if is_supported(stored):
            self._language: Language = stored
        else:
            self._language = default or detect_language()

    @classmethod
    def fixed(cls, language: Language = DEFAULT_LANGUAGE) -> "LanguagePreference":
        """A non-persisted preference pinned to ``language``."""
        return cls(MemoryStorage({LANGUAGE_KEY: language}))

    @property
    def language(self) -> Language:
        return self._language

    def set_language(self, language: str) -> None:
        if not is_supported(language):
            raise ValueError(f"Unsupported language: {language}")
        self._language = language  # type: ignore[assignment]
        self.storage.set(LANGUAGE_KEY, language)

    def t(self, key: str, **kwargs: Any) -> str:
        """Translate ``key`` into the current language."""
        return translate(key, self._language, **kwargs)

class ThemePreference:
    """Light or dark output theme, persisted in the durable store.

    On a terminal the CLI colors status labels from the theme's palette;
    dark backgrounds get the bright ANSI variants.
    """

    STATUS_TONES = {
        'active': 'success',
        'approved': 'success',
        'pending': 'warning',
        'pending_payment': 'warning',
        'expired': 'danger',
        'rejected': 'danger',
    }
    PALETTES = {
        'light': {'success': '\033[32m', 'warning': '\033[33m', 'danger': '\033[31m', 'muted': '\033[90m'},
        'dark': {'success': '\033[92m', 'warning': '\033[93m', 'danger': '\033[91m', 'muted': '\033[37m'},
    }
    RESET = '\033[0m'

    def __init__(self, storage: Storage):
        self.storage = storage
        stored = storage.get(THEME_KEY)
        self._theme: Theme = stored if stored in THEMES else 'light'

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def is_dark(self) -> bool:
        return self._theme == 'dark'

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unsupported theme: {theme}")
        self._theme = theme  # type: ignore[assignment]
        self.storage.set(THEME_KEY, theme)

    def toggle(self) -> Theme:
        self.set_theme('light' if self.is_dark else 'dark')
        return self._theme

    def paint_status(self, label: str, status: str) -> str:
        """Wrap ``label`` in the color this theme uses for ``status``."""
        tone = self.STATUS_TONES.get(status, 'muted')
        return f"{self.PALETTES[self._theme][tone]}{label}{self.RESET}"
