"""Page formats supported by the export adapters."""

from enum import Enum
from typing import Union

from folio.contexts.sections.exceptions import ValidationFailed


class PageFormat(Enum):
    """Paper size of an exported document."""

    A4 = "A4"
    LETTER = "Letter"
    LEGAL = "Legal"

    @classmethod
    def parse(cls, value: Union[str, "PageFormat"]) -> "PageFormat":
        """
        Parse a page format name, case-insensitively.

        Raises:
            ValidationFailed: If the name is not A4, Letter or Legal
        """
        if isinstance(value, cls):
            return value
        for page_format in cls:
            if str(value).strip().lower() == page_format.value.lower():
                return page_format
        raise ValidationFailed(
            f"Unsupported page format: '{value}'",
            {"page_format": value, "supported": [f.value for f in cls]},
        )

    @property
    def latex_paper(self) -> str:
        """geometry package paper option."""
        return {"A4": "a4paper", "Letter": "letterpaper", "Legal": "legalpaper"}[self.value]

    @property
    def size_mm(self) -> tuple:
        """(width, height) in millimetres."""
        return {"A4": (210.0, 297.0), "Letter": (215.9, 279.4), "Legal": (215.9, 355.6)}[self.value]
