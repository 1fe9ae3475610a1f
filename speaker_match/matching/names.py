"""Person-name equivalence utilities."""

import re
from dataclasses import dataclass, field

from rapidfuzz import fuzz

# Similarity (0-100) above which two distinct names are suggested as duplicates
DUPLICATE_SIMILARITY_THRESHOLD = 80

# First words this short are treated as possible initials ("JD", "J.")
MIN_FIRST_WORD_LENGTH = 3

_EMAIL_SEPARATORS = re.compile(r"[._\-+]+")


def normalize_name(name: str | None) -> str:
    """Trim, lowercase and collapse whitespace."""
    if not name:
        return ""
    return " ".join(name.split()).lower()


def name_match(a: str | None, b: str | None) -> bool:
    """Return True if two names plausibly refer to the same person.

    Multi-word names match on substring containment or on a shared first
    word that is not an initial. A single-word name only matches exactly,
    so "Ed" never matches "Fred" and "Jenn" never matches "Jenn Kenning".
    """
    norm_a = normalize_name(a)
    norm_b = normalize_name(b)
    if not norm_a or not norm_b:
        return False

    if norm_a == norm_b:
        return True

    words_a = norm_a.split()
    words_b = norm_b.split()
    if len(words_a) < 2 or len(words_b) < 2:
        return False

    if norm_a in norm_b or norm_b in norm_a:
        return True

    return words_a[0] == words_b[0] and len(words_a[0]) >= MIN_FIRST_WORD_LENGTH


def name_from_email(email: str | None) -> str:
    """Derive a display name from an email's local part.

    john.doe@acme.com -> "John Doe"
    """
    if not email or not email.strip():
        return "Unknown"
    local_part = email.strip().split("@")[0]
    words = [w for w in _EMAIL_SEPARATORS.split(local_part) if w]
    if not words:
        return "Unknown"
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def email_domain(email: str | None) -> str:
    """Lowercased domain of an email, or '' if there is none."""
    if not email or "@" not in email:
        return ""
    return email.strip().rsplit("@", 1)[1].lower()


# =============================================================================
# Duplicate speaker detection
# =============================================================================

@dataclass
class DuplicateSpeakers:
    """Result of duplicate speaker detection.

    auto_merge: obvious duplicates, each {"from", "to", "reason"}.
    suggestions: possible duplicates to confirm, each {"speakers", "reason"}.
    """
    auto_merge: list[dict] = field(default_factory=list)
    suggestions: list[dict] = field(default_factory=list)


def _strip_punctuation(name: str) -> str:
    return re.sub(r"[^a-z0-9\s]", "", normalize_name(name))


def detect_duplicate_speakers(speakers: list[str]) -> DuplicateSpeakers:
    """Find speaker names that probably belong to the same person.

    Args:
        speakers: Unique speaker names (e.g., from an imported transcript).

    Returns:
        DuplicateSpeakers with auto-merges and suggestions.
    """
    result = DuplicateSpeakers()
    processed: set[str] = set()

    for i, speaker1 in enumerate(speakers):
        if speaker1 in processed:
            continue

        norm1 = _strip_punctuation(speaker1)
        parts1 = speaker1.split()
        first1 = parts1[0].lower() if parts1 else ""
        last1 = parts1[-1].lower() if len(parts1) > 1 else ""

        for speaker2 in speakers[i + 1:]:
            if speaker2 in processed:
                continue

            norm2 = _strip_punctuation(speaker2)
            parts2 = speaker2.split()
            first2 = parts2[0].lower() if parts2 else ""
            last2 = parts2[-1].lower() if len(parts2) > 1 else ""

            # Same name after case/punctuation normalization; keep the longer one
            if norm1 == norm2 and speaker1 != speaker2:
                src, dst = (
                    (speaker2, speaker1) if len(speaker1) >= len(speaker2) else (speaker1, speaker2)
                )
                result.auto_merge.append(
                    {"from": src, "to": dst, "reason": "Same name (different case/punctuation)"}
                )
                processed.add(src)
                continue

            if first1 and first1 == first2:
                if len(parts1) == 1 and len(parts2) > 1:
                    result.auto_merge.append(
                        {"from": speaker1, "to": speaker2, "reason": "First name matches full name"}
                    )
                    processed.add(speaker1)
                    continue
                if len(parts2) == 1 and len(parts1) > 1:
                    result.auto_merge.append(
                        {"from": speaker2, "to": speaker1, "reason": "First name matches full name"}
                    )
                    processed.add(speaker2)
                    continue
                if len(parts1) == 1 and len(parts2) == 1:
                    result.auto_merge.append(
                        {"from": speaker2, "to": speaker1, "reason": "Same first name"}
                    )
                    processed.add(speaker2)
                    continue

            if last1 and last1 == last2 and first1 and first2 and first1[0] == first2[0]:
                result.suggestions.append({
                    "speakers": [speaker1, speaker2],
                    "reason": f'Same last name "{last1}", first names start with "{first1[0].upper()}"',
                })

            if len(norm1) > 3 and len(norm2) > 3:
                similarity = fuzz.ratio(norm1, norm2)
                if DUPLICATE_SIMILARITY_THRESHOLD < similarity < 100:
                    result.suggestions.append({
                        "speakers": [speaker1, speaker2],
                        "reason": f"Similar names ({round(similarity)}% match)",
                    })

    return result
