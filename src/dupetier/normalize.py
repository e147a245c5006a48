"""Canonicalize track identities into grouping keys."""

import re
import unicodedata

from dupetier.models import NormalizedKey, TrackIdentity, VersionClass

FILLER_WORDS = frozenset({"the"})

# Edition notes that never distinguish one recording from another
DECORATION_WORDS = (
    r"bonus(?: track)?",
    r"(?:deluxe|expanded|special)(?: edition| version)?",
    r"(?:explicit|clean|dirty)(?: version)?",
    r"official(?: music)? (?:video|audio)",
    r"(?:lyric|lyrics) video",
    r"(?:hq|hd|high quality)",
    r"(?:19|20)\d{2}",
    r"\d{2,4}\s*kbps",
)
DECORATION_RE = re.compile(r"^\s*(?:" + "|".join(DECORATION_WORDS) + r")\s*$", re.IGNORECASE)
BRACKETED_DECORATION_RE = re.compile(
    r"\s*[(\[]\s*(?:" + "|".join(DECORATION_WORDS) + r")\s*[)\]]", re.IGNORECASE
)

ORIGINAL_PHRASES = frozenset({"original", "original mix", "original version"})
CLUB_PHRASES = frozenset({"club mix", "club version", "club edit"})
RADIO_PHRASES = frozenset({"radio edit", "radio mix", "radio version"})
EXTENDED_PHRASES = frozenset({"extended", "extended mix", "extended version", "extended edit"})
REMASTER_RE = re.compile(r"^(?:(?:19|20)\d{2} )?(?:digitally )?remaster(?:ed)?(?: (?:19|20)\d{2})?(?: version)?$")


def normalize_text(text: str) -> str:
    """Casefold, strip accents and punctuation, collapse whitespace."""
    text = unicodedata.normalize("NFKD", text.casefold())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = text.replace("&", " and ")
    text = re.sub(r"['’`]", "", text)
    text = re.sub(r"[^\w\s]|_", " ", text)
    return " ".join(text.split())


def is_decoration(text: str) -> bool:
    """True for bracket content like "Deluxe Version" or "320kbps"."""
    return DECORATION_RE.match(text) is not None


def normalize_artists(artists: tuple[str, ...] | list[str]) -> frozenset[str]:
    names = (normalize_text(a) for a in artists)
    return frozenset(n for n in names if n)


def clean_title(title: str) -> str:
    stripped = BRACKETED_DECORATION_RE.sub("", title)

    text = normalize_text(stripped)
    if not text:
        return " ".join(title.casefold().split())

    words = [w for w in text.split() if w not in FILLER_WORDS]
    return " ".join(words) if words else text


def classify_version(version: str | None) -> tuple[VersionClass, str | None]:
    """Map a raw version tag onto the closed VersionClass vocabulary."""
    if version is None:
        return VersionClass.ORIGINAL, None

    text = normalize_text(version)
    if not text:
        return VersionClass.UNKNOWN, None
    if text in ORIGINAL_PHRASES:
        return VersionClass.ORIGINAL, None
    if text in CLUB_PHRASES:
        return VersionClass.CLUB_MIX, None
    if text in RADIO_PHRASES:
        return VersionClass.RADIO_EDIT, None
    if text in EXTENDED_PHRASES:
        return VersionClass.EXTENDED_MIX, None
    if REMASTER_RE.match(text):
        return VersionClass.REMASTER, None
    return VersionClass.NAMED_EDIT, text


def normalize_identity(identity: TrackIdentity) -> NormalizedKey:
    version_class, detail = classify_version(identity.version)
    return NormalizedKey(
        artist_set=normalize_artists(identity.artists),
        clean_title=clean_title(identity.title),
        version_class=version_class,
        version_detail=detail,
    )
