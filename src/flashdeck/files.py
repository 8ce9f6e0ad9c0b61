"""Locating flashcard files in a directory."""
from pathlib import Path


class SelectionError(Exception):
    """No single flashcard file could be picked."""


class EmptySelectionError(SelectionError):
    pass


class AmbiguousSelectionError(SelectionError):
    pass


def ensure_extension(name: str, extension: str) -> str:
    return name if name.endswith(extension) else name + extension


def find_flash_files(directory, extension: str) -> list[Path]:
    return sorted(p for p in Path(directory).glob(f"*{extension}") if p.is_file())


def find_single_flash_file(directory, extension: str) -> Path:
    files = find_flash_files(directory, extension)
    if not files:
        raise EmptySelectionError(f"no {extension} files found in {directory}")
    if len(files) > 1:
        raise AmbiguousSelectionError(f"multiple {extension} files found, please specify which one to use")
    return files[0]
