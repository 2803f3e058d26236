"""Language tables for platform publishing.

LOCALIZED_NAMES maps the ISO 639-2/B codes reported by ffprobe to the
language's name in that language, for track labels. PLATFORM_TAGS maps the
same codes to the IETF language tags the streaming platform expects.
Data derived from the IETF language tag and ISO 639-1 code lists.
"""

from __future__ import annotations

LOCALIZED_NAMES: dict[str, str] = {
    "afr": "Afrikaans",  # Afrikaans
    "amh": "አማርኛ",  # Amharic
    "ara": "العربية",  # Arabic
    "aze": "Azərbaycanlı",  # Azerbaijani
    "bak": "Башҡорт",  # Bashkir
    "bel": "беларуская",  # Belarusian
    "bul": "български",  # Bulgarian
    "ben": "বাংলা",  # Bengali
    "tib": "བོད་ཡིག",  # Tibetan
    "bre": "brezhoneg",  # Breton
    "bos": "bosanski/босански",  # Bosnian
    "cos": "Corsu",  # Corsican
    "cze": "čeština",  # Czech
    "wel": "Cymraeg",  # Welsh
    "dan": "dansk",  # Danish
    "ger": "Deutsch",  # German
    "eng": "English",  # English
    "est": "eesti",  # Estonian
    "baq": "euskara",  # Basque
    "per": "فارسى",  # Persian
    "fin": "suomi",  # Finnish
    "fao": "føroyskt",  # Faroese
    "fre": "français",  # French
    "gle": "Gaeilge",  # Irish
    "glg": "galego",  # Galician
    "guj": "ગુજરાતી",  # Gujarati
    "hau": "Hausa",  # Hausa
    "heb": "עברית",  # Hebrew
    "hin": "हिंदी",  # Hindi
    "hrv": "hrvatski",  # Croatian
    "hun": "magyar",  # Hungarian
    "arm": "Հայերեն",  # Armenian
    "ind": "Bahasa Indonesia",  # Indonesian
    "ibo": "Igbo",  # Igbo
    "ice": "íslenska",  # Icelandic
    "ita": "italiano",  # Italian
    "iku": "Inuktitut /ᐃᓄᒃᑎᑐᑦ (ᑲᓇᑕ)",  # Inuktitut
    "jpn": "日本語",  # Japanese
    "geo": "ქართული",  # Georgian
    "kaz": "Қазақша",  # Kazakh
    "kan": "ಕನ್ನಡ",  # Kannada
    "kor": "한국어",  # Korean
    "lao": "ລາວ",  # Lao
    "lit": "lietuvių",  # Lithuanian
    "lav": "latviešu",  # Latvian
    "mao": "Reo Māori",  # Maori
    "mac": "македонски јазик",  # Macedonian
    "mal": "മലയാളം",  # Malayalam
    "mon": "Монгол хэл/ᠮᠤᠨᠭᠭᠤᠯ ᠬᠡᠯᠡ",  # Mongolian
    "mar": "मराठी",  # Marathi
    "may": "Bahasa Malaysia",  # Malay
    "mlt": "Malti",  # Maltese
    "bur": "Myanmar",  # Burmese
    "nep": "नेपाली (नेपाल)",  # Nepali
    "nor": "norsk",  # Norwegian
    "oci": "Occitan",  # Occitan
    "pol": "polski",  # Polish
    "por": "Português",  # Portuguese
    "que": "runasimi",  # Quechua
    "roh": "Rumantsch",  # Romansh
    "rus": "русский",  # Russian
    "kin": "Kinyarwanda",  # Kinyarwanda
    "san": "संस्कृत",  # Sanskrit
    "slo": "slovenčina",  # Slovak
    "slv": "slovenski",  # Slovenian
    "alb": "shqipe",  # Albanian
    "srp": "srpski/српски",  # Serbian
    "swe": "svenska",  # Swedish
    "tam": "தமிழ்",  # Tamil
    "tel": "తెలుగు",  # Telugu
    "tgk": "Тоҷикӣ",  # Tajik
    "tha": "ไทย",  # Thai
    "tuk": "türkmençe",  # Turkmen
    "tsn": "Setswana",  # Tswana
    "tur": "Türkçe",  # Turkish
    "tat": "Татарча",  # Tatar
    "ukr": "українська",  # Ukrainian
    "urd": "اُردو",  # Urdu
    "uzb": "U'zbek/Ўзбек",  # Uzbek
    "vie": "Tiếng Việt/㗂越",  # Vietnamese
    "wol": "Wolof",  # Wolof
    "xho": "isiXhosa",  # Xhosa
    "yor": "Yoruba",  # Yoruba
    "chi": "中文",  # Chinese
    "zul": "isiZulu",  # Zulu
}

PLATFORM_TAGS: dict[str, str] = {
    "afr": "af",  # Afrikaans
    "amh": "am",  # Amharic
    "ara": "ar",  # Arabic
    "asm": "as",  # Assamese
    "aze": "az",  # Azerbaijani
    "bak": "ba",  # Bashkir
    "bel": "be",  # Belarusian
    "bul": "bg",  # Bulgarian
    "ben": "bn",  # Bengali
    "tib": "bo",  # Tibetan
    "bre": "br",  # Breton
    "bos": "bs",  # Bosnian
    "cos": "co",  # Corsican
    "cze": "cs",  # Czech
    "wel": "cy",  # Welsh
    "dan": "da",  # Danish
    "ger": "de",  # German
    "eng": "en",  # English
    "est": "et",  # Estonian
    "baq": "eu",  # Basque
    "per": "fa",  # Persian
    "fin": "fi",  # Finnish
    "fao": "fo",  # Faroese
    "fre": "fr",  # French
    "gle": "ga",  # Irish
    "glg": "gl",  # Galician
    "guj": "gu",  # Gujarati
    "hau": "ha",  # Hausa
    "heb": "he",  # Hebrew
    "hin": "hi",  # Hindi
    "hrv": "hr",  # Croatian
    "hun": "hu",  # Hungarian
    "arm": "hy",  # Armenian
    "ind": "id",  # Indonesian
    "ibo": "ig",  # Igbo
    "ice": "is",  # Icelandic
    "ita": "it",  # Italian
    "iku": "iu",  # Inuktitut
    "jpn": "ja",  # Japanese
    "geo": "ka",  # Georgian
    "kaz": "kk",  # Kazakh
    "kan": "kn",  # Kannada
    "kor": "ko",  # Korean
    "lao": "lo",  # Lao
    "lit": "lt",  # Lithuanian
    "lav": "lv",  # Latvian
    "mao": "mi",  # Maori
    "mac": "mk",  # Macedonian
    "mal": "ml",  # Malayalam
    "mon": "mn",  # Mongolian
    "mar": "mr",  # Marathi
    "may": "ms",  # Malay
    "mlt": "mt",  # Maltese
    "bur": "my",  # Burmese
    "nep": "ne",  # Nepali
    "nor": "no",  # Norwegian
    "oci": "oc",  # Occitan
    "pol": "pl",  # Polish
    "por": "pt",  # Portuguese
    "que": "qu",  # Quechua
    "roh": "rm",  # Romansh
    "rus": "ru",  # Russian
    "kin": "rw",  # Kinyarwanda
    "san": "sa",  # Sanskrit
    "slo": "sk",  # Slovak
    "slv": "sl",  # Slovenian
    "alb": "sq",  # Albanian
    "srp": "sr",  # Serbian
    "swe": "sv",  # Swedish
    "tam": "ta",  # Tamil
    "tel": "te",  # Telugu
    "tgk": "tg",  # Tajik
    "tha": "th",  # Thai
    "tuk": "tk",  # Turkmen
    "tsn": "tn",  # Tswana
    "tur": "tr",  # Turkish
    "tat": "tt",  # Tatar
    "ukr": "uk",  # Ukrainian
    "urd": "ur",  # Urdu
    "uzb": "uz",  # Uzbek
    "vie": "vi",  # Vietnamese
    "wol": "wo",  # Wolof
    "xho": "xh",  # Xhosa
    "yor": "yo",  # Yoruba
    "chi": "zh",  # Chinese
}


def language_label(code: str | None, title: str | None = None) -> str | None:
    """Compose a human readable label for a track.

    Args:
        code: ISO 639-2/B language code, or None.
        title: Optional track title appended in parentheses.

    Returns:
        The localized language name (or the raw code when unknown), with the
        title appended. None when there is neither code nor title.
    """
    if code is None:
        return title
    name = LOCALIZED_NAMES.get(code, code)
    if title:
        return f"{name} ({title})"
    return name


def platform_language_tag(code: str) -> str:
    """Translate an ffprobe language code to the platform's tag.

    Codes absent from PLATFORM_TAGS pass through unchanged.
    """
    return PLATFORM_TAGS.get(code, code)
