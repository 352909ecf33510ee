"""
Text normalization utilities for recognized picture text.

Tesseract output carries page-break form feeds, odd Unicode spacing and ragged
blank lines; this module reduces it to clean lines of text.
"""

import re


class TextNormalizer:
    """Normalizes text produced by the OCR collaborator."""

    SPECIAL_CHARS = {
        '\u00a0': ' ',      # Non-breaking space
        '\u2009': ' ',      # Thin space
        '\u2007': ' ',      # Figure space
        '\u2008': ' ',      # Punctuation space
        '\u200b': '',       # Zero-width space
        '\u200c': '',       # Zero-width non-joiner
        '\u200d': '',       # Zero-width joiner
        '\ufeff': '',       # Byte order mark
        '\u00ad': '',       # Soft hyphen
        '\u2011': '-',      # Non-breaking hyphen
    }

    # Runs of horizontal whitespace inside a line
    INLINE_WHITESPACE_PATTERN = re.compile(r'[ \t]+')

    # Control characters except newline; form feed ends every Tesseract page
    CONTROL_CHARS_PATTERN = re.compile(r'[\x00-\x09\x0b-\x1f\x7f-\x9f]')

    def __init__(self, keep_line_breaks: bool = True):
        """Initialize text normalizer.

        Args:
            keep_line_breaks: If True, preserve one newline between non-empty
                              lines. If False, join everything into one line.
        """
        self.keep_line_breaks = keep_line_breaks

    def normalize_text(self, text: str) -> str:
        if not text:
            return ""

        normalized = text.replace('\r\n', '\n').replace('\r', '\n')
        for original, replacement in self.SPECIAL_CHARS.items():
            normalized = normalized.replace(original, replacement)
        normalized = self.CONTROL_CHARS_PATTERN.sub(' ', normalized)

        lines = [
            self.INLINE_WHITESPACE_PATTERN.sub(' ', line).strip()
            for line in normalized.split('\n')
        ]
        lines = [line for line in lines if line]
        separator = '\n' if self.keep_line_breaks else ' '
        return separator.join(lines)


def normalize_ocr_text(text: str, keep_line_breaks: bool = True) -> str:
    """Convenience wrapper around :class:`TextNormalizer`."""
    return TextNormalizer(keep_line_breaks=keep_line_breaks).normalize_text(text)
