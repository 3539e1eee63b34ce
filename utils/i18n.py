import json
import logging
import os
from typing import Dict

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = 'en'
LOCALES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                           'locales')


class LanguageManager:
    """
    Manages application language and loads translations.

    The default language is always loaded as a fallback, so a key missing
    from the active language still resolves to English text.
    """

    def __init__(self, language_dir=LOCALES_DIR):
        self.language_dir = language_dir
        self.translations: Dict[str, str] = {}
        self.fallback_translations: Dict[str, str] = self._read_language_file(
            DEFAULT_LANGUAGE)
        self.current_language = DEFAULT_LANGUAGE

    def _read_language_file(self, language_code) -> Dict[str, str]:
        file_path = os.path.join(self.language_dir, f'{language_code}.json')
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.debug(f"Language file not found at {file_path}")
            return {}
        except json.JSONDecodeError:
            logger.error(f"Could not decode JSON from {file_path}")
            return {}
        return data if isinstance(data, dict) else {}

    def load_language(self, language_code):
        """
        Loads a specific language file and updates the translations.
        """
        file_path = os.path.join(self.language_dir, f'{language_code}.json')
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                self.translations = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Language file not found at {file_path}")
            return False
        except json.JSONDecodeError:
            logger.error(f"Could not decode JSON from {file_path}")
            return False

        self.current_language = language_code
        logger.debug(f"Successfully loaded language: {language_code}")
        return True

    def translate(self, key):
        """
        Translates a given key using the loaded language file.
        Falls back to English, then to the key itself.
        """
        if key in self.translations:
            return self.translations[key]
        return self.fallback_translations.get(key, key)


# --- Global Instance and Function ---
language_manager = LanguageManager()


def _(key):
    """
    Global translation function.
    Example: logger.info(_("mover_started").format(interval=30, distance=1))
    """
    return language_manager.translate(key)


def switch_language(language_code):
    """
    Global function to switch the application language.
    """
    return language_manager.load_language(language_code)
