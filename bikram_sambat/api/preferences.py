"""Date-system and language preferences shared by server and client layers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Optional

try:  # pragma: no cover - frappe is unavailable during tests
    import frappe  # type: ignore
except ImportError:  # pragma: no cover - handled via fallback store
    frappe = None  # type: ignore

__all__ = [
    "CalendarSelection",
    "DEFAULT_DATE_SYSTEM",
    "DEFAULT_LANGUAGE",
    "VALID_DATE_SYSTEMS",
    "VALID_LANGUAGES",
    "get_calendar_preference",
    "get_preference_context",
    "get_system_preference",
    "get_user_preference",
    "is_bs_enabled",
    "resolve_date_system",
    "resolve_language",
    "set_calendar_preference",
    "set_system_preference",
    "set_user_preference",
]

PreferenceSource = Literal["default", "language", "system", "user"]
PreferenceKind = Literal["date_system", "language"]

DEFAULT_DATE_SYSTEM = "ad"
DEFAULT_LANGUAGE = "en"
VALID_DATE_SYSTEMS = {"ad", "bs"}
VALID_LANGUAGES = {"en", "ne"}

_VALID_VALUES: Dict[str, set] = {
    "date_system": VALID_DATE_SYSTEMS,
    "language": VALID_LANGUAGES,
}
_PREFERENCE_KEYS = {
    "date_system": "bikram_sambat_date_system",
    "language": "bikram_sambat_language",
}
# Nepali speakers read dates in BS unless they chose otherwise
_LANGUAGE_DATE_SYSTEMS = {"ne": "bs", "en": "ad"}


@dataclass(frozen=True)
class CalendarSelection:
    """Resolved preference value and where it came from."""

    value: str
    source: PreferenceSource


_FALLBACK_STORE: Dict[str, Dict[str, Dict[Optional[str], str]]] = {
    "system": {"date_system": {}, "language": {}},
    "user": {"date_system": {}, "language": {}},
}


def _frappe_db():
    """Return ``frappe.db`` when a site connection is active."""

    if frappe is None:
        return None
    return getattr(frappe, "db", None)


def _require_kind(kind: str) -> str:
    if kind not in _VALID_VALUES:
        raise ValueError("preference must be one of: {}".format(", ".join(sorted(_VALID_VALUES))))
    return kind


def _normalize(kind: str, value: Optional[str]) -> Optional[str]:
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _VALID_VALUES[kind]:
            return normalized
    return None


def _require_value(kind: str, value: Optional[str]) -> str:
    normalized = _normalize(kind, value)
    if not normalized:
        raise ValueError(
            "{} must be one of: {}".format(kind, ", ".join(sorted(_VALID_VALUES[kind])))
        )
    return normalized


def _session_user(user: Optional[str]) -> Optional[str]:
    if user:
        return user
    if frappe is not None:
        return getattr(getattr(frappe, "session", None), "user", None)  # type: ignore[attr-defined]
    return None


def _read_system_value(kind: str) -> Optional[str]:
    db = _frappe_db()
    if db is not None:
        return _normalize(kind, db.get_default(_PREFERENCE_KEYS[kind]))
    return _FALLBACK_STORE["system"][kind].get(None)


def _write_system_value(kind: str, value: str) -> None:
    db = _frappe_db()
    if db is not None:
        db.set_default(_PREFERENCE_KEYS[kind], value)
        if hasattr(frappe, "clear_cache"):
            frappe.clear_cache()
        return
    _FALLBACK_STORE["system"][kind][None] = value


def _read_user_value(kind: str, user: Optional[str]) -> Optional[str]:
    db = _frappe_db()
    if db is not None:
        user = _session_user(user)
        if not user or user == "Guest":
            return None
        return _normalize(kind, db.get_default(_PREFERENCE_KEYS[kind], user=user))
    if user is None:
        return None
    return _FALLBACK_STORE["user"][kind].get(user)


def _write_user_value(kind: str, value: str, user: Optional[str]) -> None:
    db = _frappe_db()
    if db is not None:
        user = _session_user(user)
        if not user or user == "Guest":  # pragma: no cover - depends on Frappe session
            raise ValueError("Cannot store calendar preference for anonymous sessions")
        db.set_default(_PREFERENCE_KEYS[kind], value, user=user)
        if hasattr(frappe, "defaults") and hasattr(frappe.defaults, "clear_cache"):
            frappe.defaults.clear_cache(user=user)  # type: ignore[attr-defined]
        return
    if user is None:
        raise RuntimeError("user must be provided when frappe is unavailable")
    _FALLBACK_STORE["user"][kind][user] = value


def get_system_preference(kind: PreferenceKind, *, raw: bool = False) -> str:
    """Return the site-wide value for ``kind`` (``date_system`` or ``language``)."""

    stored = _read_system_value(_require_kind(kind))
    if raw:
        return stored or ""
    return stored or (DEFAULT_DATE_SYSTEM if kind == "date_system" else DEFAULT_LANGUAGE)


def set_system_preference(kind: PreferenceKind, value: str) -> CalendarSelection:
    _write_system_value(_require_kind(kind), _require_value(kind, value))
    return resolve_date_system() if kind == "date_system" else resolve_language()


def get_user_preference(kind: PreferenceKind, user: Optional[str] = None) -> Optional[str]:
    return _read_user_value(_require_kind(kind), user)


def set_user_preference(kind: PreferenceKind, value: str, user: Optional[str] = None) -> CalendarSelection:
    _write_user_value(_require_kind(kind), _require_value(kind, value), user)
    return resolve_date_system(user) if kind == "date_system" else resolve_language(user)


def resolve_language(user: Optional[str] = None) -> CalendarSelection:
    user_value = get_user_preference("language", user)
    if user_value:
        return CalendarSelection(user_value, "user")

    system_raw = get_system_preference("language", raw=True)
    if system_raw:
        return CalendarSelection(system_raw, "system")

    return CalendarSelection(DEFAULT_LANGUAGE, "default")


def resolve_date_system(user: Optional[str] = None) -> CalendarSelection:
    """Resolve the active date system; an explicit choice beats the language."""

    user_value = get_user_preference("date_system", user)
    if user_value:
        return CalendarSelection(user_value, "user")

    system_raw = get_system_preference("date_system", raw=True)
    if system_raw:
        return CalendarSelection(system_raw, "system")

    language = resolve_language(user)
    if language.source != "default":
        return CalendarSelection(_LANGUAGE_DATE_SYSTEMS[language.value], "language")

    return CalendarSelection(DEFAULT_DATE_SYSTEM, "default")


def is_bs_enabled(user: Optional[str] = None) -> bool:
    """Return ``True`` if dates should be shown in Bikram Sambat for the user."""

    return resolve_date_system(user).value == "bs"


def get_preference_context(user: Optional[str] = None) -> Dict[str, object]:
    """Return a serialisable representation of the resolved preferences."""

    date_system = resolve_date_system(user)
    language = resolve_language(user)
    context: Dict[str, object] = {
        "date_system": date_system.value,
        "date_system_source": date_system.source,
        "language": language.value,
        "language_source": language.source,
        "is_bs_enabled": date_system.value == "bs",
    }

    for kind in ("date_system", "language"):
        system_raw = get_system_preference(kind, raw=True)  # type: ignore[arg-type]
        if system_raw:
            context[f"system_{kind}"] = system_raw
        user_raw = get_user_preference(kind, user)  # type: ignore[arg-type]
        if user_raw:
            context[f"user_{kind}"] = user_raw

    return context


def set_calendar_preference(
    scope: str,
    date_system: Optional[str] = None,
    language: Optional[str] = None,
    user: Optional[str] = None,
) -> Dict[str, object]:
    """Update date-system and/or language preferences and return the context."""

    if date_system is None and language is None:
        raise ValueError("provide date_system, language, or both")

    updates = {"date_system": date_system, "language": language}
    normalized_scope = (scope or "user").strip().lower()
    if normalized_scope == "system":
        for kind, value in updates.items():
            if value is not None:
                set_system_preference(kind, value)  # type: ignore[arg-type]
        return get_preference_context()
    if normalized_scope == "user":
        for kind, value in updates.items():
            if value is not None:
                set_user_preference(kind, value, user)  # type: ignore[arg-type]
        return get_preference_context(user)
    raise ValueError("scope must be either 'system' or 'user'")


def get_calendar_preference(user: Optional[str] = None) -> Dict[str, object]:
    """Return the currently resolved preference context."""

    return get_preference_context(user)


def _maybe_whitelist(func):  # pragma: no cover - exercised in Frappe environments
    if frappe and hasattr(frappe, "whitelist"):
        return frappe.whitelist()(func)  # type: ignore[attr-defined]
    return func


get_calendar_preference = _maybe_whitelist(get_calendar_preference)
set_calendar_preference = _maybe_whitelist(set_calendar_preference)
