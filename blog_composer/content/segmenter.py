"""
Paragraph segmentation of a post body.
"""
import re

# Only real line breaks; str.splitlines() also splits on form feeds and U+2028.
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def segment(body):
    """
    Split ``body`` into paragraphs.

    One or more blank lines (whitespace-only lines count as blank) separate
    paragraphs. Each paragraph is trimmed; line breaks inside a paragraph are
    kept. Paragraph numbering used for image placement starts at 1.
    """
    if not body:
        return []

    paragraphs = []
    current = []
    for line in _LINE_BREAK_RE.split(body):
        if line.strip():
            current.append(line)
        elif current:
            paragraphs.append("\n".join(current).strip())
            current = []
    if current:
        paragraphs.append("\n".join(current).strip())
    return paragraphs
