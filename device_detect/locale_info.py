# device_detect/locale_info.py

import re
from typing import Dict, Iterable, List, Optional
from device_detect.environment import ClientEnvironment
from device_detect.iso_codes import COUNTRY_DISPLAY_NAMES, ISO_639_1, ISO_3166_1

_SUBTAG_SEPARATOR = re.compile(r"[-_]")


class InvalidCountryCodeError(ValueError):
    """Country lookups only accept two-letter codes"""


def lookup_language_name(code: str) -> str:
    """Language name for an ISO 639-1 code, or the code itself if unknown"""
    return ISO_639_1.get(code.lower(), code)


def lookup_country_name(code: str) -> str:
    """Country name for an ISO 3166-1 alpha-2 code, or the code itself if unknown"""
    if len(code) != 2:
        raise InvalidCountryCodeError(f"Country code must have exactly two characters: {code!r}")

    return ISO_3166_1.get(code.upper(), code)


def _resolve_region(subtag: str) -> Optional[str]:
    if len(subtag) != 2:
        return None
    code = subtag.upper()
    return COUNTRY_DISPLAY_NAMES.get(code) or ISO_3166_1.get(code)


def format_supported_languages(languages: Iterable[str]) -> List[str]:
    """
    Turn locale tags into display names, merging region variants of one language.

    ["en-US", "en-GB", "fr"] -> ["English (United States, United Kingdom)", "French"]
    Output keeps the order in which each language was first seen.
    """
    regions_by_language: Dict[str, List[str]] = {}

    for tag in languages:
        subtags = [subtag for subtag in _SUBTAG_SEPARATOR.split(tag.strip()) if subtag]
        if not subtags:
            continue

        name = lookup_language_name(subtags[0])
        regions = regions_by_language.setdefault(name, [])

        for subtag in subtags[1:]:
            country = _resolve_region(subtag)
            if country and country not in regions:
                regions.append(country)

    formatted = []
    for name, regions in regions_by_language.items():
        if regions:
            formatted.append(f"{name} ({', '.join(regions)})")
        else:
            formatted.append(name)

    return formatted


def get_browser_language(language: Optional[str]) -> str:
    """Display name of the current locale tag, the tag itself when unknown"""
    if not language:
        return "-"
    return ISO_639_1.get(language.lower(), language)


def get_languages(languages: Iterable[str]) -> List[str]:
    """Raw locale tags, lower-cased, in reported order (no name resolution)"""
    return [tag.lower() for tag in languages]


def get_current_time_zone(env: ClientEnvironment) -> str:
    """IANA time zone reported by the client, "-" if it could not be resolved"""
    if not env.time_zone:
        return "-"
    return env.time_zone
