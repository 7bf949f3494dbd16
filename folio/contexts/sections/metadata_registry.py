"""
Section Metadata Registry

Bookkeeping for SectionMeta entries of one resume document. The registry wraps
the document's own metadata map, so custom keys live inside the document and
never leak across users.
"""

from typing import Dict, Iterator, List, Optional

from folio.contexts.sections.defaults import BUILTIN_SECTION_KEYS, DEFAULT_SECTION_NAMES, is_builtin_section
from folio.contexts.sections.exceptions import DuplicateKey, NotDeletable, NotFound, ValidationFailed
from folio.contexts.sections.section_data_structure import SectionMeta
from folio.utils.text_processing import title_from_slug


class SectionMetaRegistry:
    """
    Registry of section metadata keyed by section key.

    Operates directly on the map it is given; the edit engine hands it the
    metadata map of a model copy so registry changes commit with the edit.

    Example:
        registry = SectionMetaRegistry(model.sections.section_meta)
        registry.register_custom("volunteering", "Volunteering")
        registry.display_name("volunteering")  # "Volunteering"
    """

    def __init__(self, section_meta: Optional[Dict[str, SectionMeta]] = None):
        self._meta = section_meta if section_meta is not None else {}

    def __contains__(self, key: str) -> bool:
        return key in self._meta

    def __iter__(self) -> Iterator[str]:
        return iter(self._meta)

    def __len__(self) -> int:
        return len(self._meta)

    def get_meta(self, key: str) -> SectionMeta:
        """
        Get metadata for a section key.

        Raises:
            NotFound: If the key has no metadata entry
        """
        if key not in self._meta:
            raise NotFound(f"No section metadata for '{key}'", {"section_key": key})
        return self._meta[key]

    def register_custom(self, key: str, name: str) -> SectionMeta:
        """
        Register metadata for a new custom section (deletable and renamable).

        Raises:
            DuplicateKey: If the key is a reserved built-in key or already registered
            ValidationFailed: If the key or name is empty
        """
        if not key or not name.strip():
            raise ValidationFailed("Custom section name must not be empty", {"section_key": key})
        if is_builtin_section(key) or key in self._meta:
            raise DuplicateKey(f"Section key already exists: '{key}'", {"section_key": key})

        meta = SectionMeta(name=name.strip(), deletable=True, renamable=True)
        self._meta[key] = meta
        return meta

    def restore_builtin(self, key: str) -> SectionMeta:
        """Re-create default metadata for a built-in key if it was removed."""
        if key not in self._meta:
            self._meta[key] = SectionMeta(name=DEFAULT_SECTION_NAMES[key])
        return self._meta[key]

    def unregister(self, key: str) -> None:
        """
        Remove the metadata entry of a section.

        Raises:
            NotFound: If the key has no metadata entry
            NotDeletable: If the metadata forbids deletion
        """
        meta = self.get_meta(key)
        if not meta.deletable:
            raise NotDeletable(f"Section '{meta.name}' cannot be deleted", {"section_key": key})
        del self._meta[key]

    def rename(self, key: str, name: str) -> SectionMeta:
        """
        Change the display name of a section.

        Raises:
            NotFound: If the key has no metadata entry
            ValidationFailed: If the section is not renamable or the name is empty
        """
        meta = self.get_meta(key)
        if not meta.renamable:
            raise ValidationFailed(f"Section '{meta.name}' cannot be renamed", {"section_key": key})
        if not name.strip():
            raise ValidationFailed("Section name must not be empty", {"section_key": key})
        meta.name = name.strip()
        return meta

    def display_name(self, key: str) -> str:
        """Display name for a key, falling back to a title derived from the key."""
        meta = self._meta.get(key)
        if meta and meta.name:
            return meta.name
        return DEFAULT_SECTION_NAMES.get(key) or title_from_slug(key)

    def builtin_keys(self) -> List[str]:
        return [key for key in BUILTIN_SECTION_KEYS if key in self._meta]

    def custom_keys(self) -> List[str]:
        return [key for key in self._meta if not is_builtin_section(key)]
