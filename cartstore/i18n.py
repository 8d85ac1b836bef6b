"""User-facing cart messages."""

SUPPORTED_LANGUAGES = {
    "pt": "Português",
    "en": "English",
}

# Fallback when a requested language is not shipped
DEFAULT_LANGUAGE = "en"

_TRANSLATIONS: dict[str, dict[str, str]] = {
    "pt": {
        "cart.out_of_stock": "Quantidade solicitada fora de estoque",
        "cart.add_failed": "Erro na adição do produto",
        "cart.remove_failed": "Erro na remoção do produto",
        "cart.update_failed": "Erro na alteração de quantidade do produto",
    },
    "en": {
        "cart.out_of_stock": "Requested amount is out of stock",
        "cart.add_failed": "Error adding product",
        "cart.remove_failed": "Error removing product",
        "cart.update_failed": "Error updating product amount",
    },
}


def detect_language(language_code: str | None) -> str:
    """Normalize a language code ("pt-BR" -> "pt") to a supported one."""
    if not language_code:
        return DEFAULT_LANGUAGE
    lang = language_code.split("-")[0].lower()
    return lang if lang in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def get_text(key: str, lang: str = DEFAULT_LANGUAGE, default: str | None = None) -> str:
    """
    Get translated text by key.

    Args:
        key: Message key (e.g., "cart.add_failed")
        lang: Language code (e.g., "pt", "pt-BR", "en")
        default: Value returned when the key is unknown (instead of the key)

    Returns:
        Translated string, falling back to English, then default/key
    """
    lang = detect_language(lang)
    text = _TRANSLATIONS[lang].get(key)
    if text is None and lang != DEFAULT_LANGUAGE:
        text = _TRANSLATIONS[DEFAULT_LANGUAGE].get(key)
    if text is None:
        return default if default is not None else key
    return text


__all__ = ["SUPPORTED_LANGUAGES", "DEFAULT_LANGUAGE", "detect_language", "get_text"]
