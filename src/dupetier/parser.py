"""Parse raw filenames into track identities.

Filenames follow the loose "Artist - Title (Version)" convention. Everything
here is string work with no I/O, so a stem in always gives the same identity
out.
"""

import re
from pathlib import Path

from dupetier.errors import ParseError, ParseErrorKind
from dupetier.models import TrackIdentity
from dupetier.normalize import is_decoration

# "01. ", "01 - ", "07_", "3) " but not "50 Cent"
TRACK_NUMBER_RE = re.compile(r"^\d{1,3}\s*(?:[._)]|\s[-–—]\s)\s*")
SEPARATOR_RE = re.compile(r"\s+[-–—]\s+")

CONNECTOR_RE = re.compile(
    r"\s*(?:,|&|\bfeat\.?\s|\bft\.?\s|\bfeaturing\b|\bvs\.?\s|\baka\b|\bpres\.\s|\bpresents\b|\sx\s)\s*",
    re.IGNORECASE,
)
ARTIST_BRACKET_RE = re.compile(r"\s*[(\[]([^()\[\]]*)[)\]]")
DJ_ALIAS_RE = re.compile(r"(?<=\S)\s+(?=DJ\s+\S)")

TRAILING_GROUP_RE = re.compile(r"\s*([(\[][^()\[\]]*[)\]])\s*$")
FEAT_GROUP_RE = re.compile(r"^(?:feat\.?|ft\.?|featuring|with)\s+(.+)$", re.IGNORECASE)
FEAT_IN_TITLE_RE = re.compile(
    r"\s+(?:feat\.?|ft\.?|featuring)\s+(.+?)(?=\s*[(\[]|$)", re.IGNORECASE
)

VERSION_MARKERS = frozenset({
    "remix", "mix", "rmx", "edit", "rework", "bootleg", "mashup", "flip",
    "recut", "reprise", "version", "dub", "instrumental", "acapella",
    "acoustic", "live", "remaster", "remastered", "vip", "extended", "radio",
    "club", "original",
})

# Unbracketed trailing phrases; only exact phrases, a lone "Mix" is too vague.
FREE_TEXT_PHRASES = (
    "original mix", "club mix", "club version", "radio edit", "radio mix",
    "radio version", "extended mix", "extended version", "dub mix",
    "instrumental mix", "vip mix", "remastered", "remaster",
)


def is_version_text(text: str) -> bool:
    """True when text carries version meaning (contains a known marker word)."""
    tokens = re.findall(r"[a-z0-9]+", text.lower())
    return any(token in VERSION_MARKERS for token in tokens)


def _collapse(text: str) -> str:
    return " ".join(text.split())


def split_artists(segment: str) -> list[str]:
    """Split an artist credit into names, keeping aliases as their own entries."""
    # "Name (Alias)" -> "Name, Alias"
    segment = ARTIST_BRACKET_RE.sub(lambda m: ", " + m.group(1), segment)
    names: list[str] = []
    for piece in CONNECTOR_RE.split(segment):
        for name in DJ_ALIAS_RE.split(piece):
            name = _collapse(name).strip(" -")
            if name:
                names.append(name)
    return names


def _dedupe(names: list[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    out: list[str] = []
    for name in names:
        folded = name.casefold()
        if folded in seen:
            continue
        seen.add(folded)
        out.append(name)
    return tuple(out)


def _split_title(segment: str) -> tuple[str, str | None, list[str]]:
    """Split a title segment into (title, version, featured artists)."""
    featured: list[str] = []

    def _take_feat(match: re.Match) -> str:
        featured.extend(split_artists(match.group(1)))
        return ""

    segment = FEAT_IN_TITLE_RE.sub(_take_feat, segment)

    # Peel bracket groups off the end, then restore source order
    groups: list[str] = []
    base = segment
    while (match := TRAILING_GROUP_RE.search(base)) is not None:
        groups.append(match.group(1))
        base = base[: match.start()]
    groups.reverse()

    kept: list[str] = []
    for group in groups:
        feat = FEAT_GROUP_RE.match(group[1:-1].strip())
        if feat:
            featured.extend(split_artists(feat.group(1)))
        else:
            kept.append(group)

    # Last group is checked first; edition notes and other non-version
    # groups stay on the title
    version: str | None = None
    for i in range(len(kept) - 1, -1, -1):
        content = _collapse(kept[i][1:-1])
        if content and not is_decoration(content) and is_version_text(content):
            version = content
            del kept[i]
            break

    base = _collapse(base)
    if version is None:
        version, base = _trailing_version(base)

    title = _collapse(" ".join([base, *kept]))
    return title, version, featured


def _trailing_version(title: str) -> tuple[str | None, str]:
    """Find an unbracketed version: "Title - Radio Edit" or "Title Club Mix"."""
    parts = SEPARATOR_RE.split(title)
    if len(parts) > 1 and is_version_text(parts[-1]):
        head = " - ".join(parts[:-1]).strip()
        if head:
            return _collapse(parts[-1]), head

    lowered = title.lower()
    for phrase in FREE_TEXT_PHRASES:
        if lowered.endswith(" " + phrase):
            head = title[: -len(phrase)].strip()
            if head:
                return title[-len(phrase):], head
    return None, title


def parse_filename(name: str) -> TrackIdentity:
    """Parse a filename without extension into a TrackIdentity.

    Raises ParseError(UNPARSEABLE) when nothing usable is left after cleanup
    and ParseError(EMPTY_TITLE) when only a version tag remains.
    """
    cleaned = TRACK_NUMBER_RE.sub("", name.strip())
    cleaned = _collapse(cleaned.replace("_", " "))
    if not any(ch.isalnum() for ch in cleaned):
        raise ParseError(ParseErrorKind.UNPARSEABLE, name)

    match = SEPARATOR_RE.search(cleaned)
    if match is None:
        artist_segment, title_segment = "", cleaned
    else:
        artist_segment = cleaned[: match.start()]
        title_segment = cleaned[match.end():]

    artists = split_artists(artist_segment)
    title, version, featured = _split_title(title_segment)
    if not title:
        raise ParseError(ParseErrorKind.EMPTY_TITLE, name)

    return TrackIdentity(artists=_dedupe(artists + featured), title=title, version=version)


def parse_path(path: Path) -> TrackIdentity:
    return parse_filename(path.stem)
