"""
Text processing utilities shared across contexts.

Identifier generation, slug derivation, LaTeX escaping and filename helpers.
"""

import re
import unicodedata
import uuid
from typing import Iterable, Optional

WHITESPACE_PATTERN = re.compile(r"\s+")

# Non-Latin characters the LaTeX layout can typeset with pdflatex + inputenc[utf8]
LATEX_UNICODE_SYMBOLS = frozenset("\u2013\u2014\u2018\u2019\u201c\u201d\u2026\u2022\u2192\u20ac")
# Latin Extended-A letters without a T1 glyph
LATEX_UNSUPPORTED_LATIN = frozenset("\u0138\u0149\u017f")


def generate_id(prefix: str, taken: Optional[Iterable[str]] = None) -> str:
    """
    Generate a unique identifier with a readable prefix (e.g., "exp-3f9a1c02b7de").

    Args:
        prefix: Short type prefix ("exp", "edu", "bullet", ...)
        taken: Identifiers already in use in the enclosing collection

    Returns:
        Identifier not present in `taken`
    """
    taken = set(taken or ())
    while True:
        candidate = f"{prefix}-{uuid.uuid4().hex[:12]}"
        if candidate not in taken:
            return candidate


def slugify_section_name(name: str) -> str:
    """
    Derive a section key from a display name: lowercase, whitespace runs to hyphens.

    Example:
        >>> slugify_section_name("My New Section")
        'my-new-section'
    """
    return WHITESPACE_PATTERN.sub("-", name.strip().lower())


def title_from_slug(key: str) -> str:
    """
    Format a section key for display when no metadata name exists.

    Example:
        >>> title_from_slug("volunteer-work")
        'Volunteer Work'
    """
    return " ".join(word[:1].upper() + word[1:] for word in key.split("-") if word)


def safe_filename(title: str, extension: str) -> str:
    """
    Build a download filename from a resume title (whitespace runs become underscores).

    Example:
        >>> safe_filename("Senior Engineer Resume", "pdf")
        'Senior_Engineer_Resume.pdf'
    """
    stem = WHITESPACE_PATTERN.sub("_", (title or "").strip()) or "resume"
    stem = re.sub(r"[^\w.\-]", "", stem) or "resume"
    return f"{stem}.{extension.lstrip('.')}"


def to_latex(plaintext_str: str) -> str:
    """
    Convert plaintext to LaTeX by escaping special characters.

    Conversions:
    - \\ → \\textbackslash{} (backslash, must be first to avoid double-escaping)
    - % $ & _ # { } → backslash-escaped
    - ~ → \\textasciitilde{}
    - ^ → \\textasciicircum{}
    - characters pdflatex cannot typeset → ASCII transliteration, else "?"

    Args:
        plaintext_str: Plain text string

    Returns:
        LaTeX string with special characters escaped

    Example:
        >>> to_latex("AI & Machine Learning")
        'AI \\\\& Machine Learning'
    """
    if not plaintext_str:
        return ""

    # Placeholder keeps the braces of \textbackslash{} from being escaped below
    result = plaintext_str.replace("\\", "\x00")
    for char in ("%", "$", "&", "_", "#", "{", "}"):
        result = result.replace(char, "\\" + char)
    result = result.replace("~", r"\textasciitilde{}")
    result = result.replace("^", r"\textasciicircum{}")
    return latex_safe_unicode(result.replace("\x00", r"\textbackslash{}"))


def latex_safe_unicode(text: str) -> str:
    """
    Replace characters outside Latin-1, Latin Extended-A and a few typographic
    symbols, which pdflatex rejects as undefined Unicode characters.

    Accented letters outside that range fall back to their base letter;
    anything else (CJK, emoji) becomes "?".

    Example:
        >>> latex_safe_unicode("Jos\u00e9 \u01cevila \u5f20")
        'Jos\u00e9 avila ?'
    """
    chars = []
    for char in text:
        if (ord(char) <= 0x17F and char not in LATEX_UNSUPPORTED_LATIN) or char in LATEX_UNICODE_SYMBOLS:
            chars.append(char)
            continue
        ascii_form = unicodedata.normalize("NFKD", char).encode("ascii", "ignore").decode("ascii")
        chars.append(ascii_form or "?")
    return "".join(chars)
