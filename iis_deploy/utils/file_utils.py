# iis_deploy/utils/file_utils.py
"""File operation utilities"""

import hashlib
import shutil
from pathlib import Path
from typing import List


def calculate_file_checksum(file_path: Path,
                            algorithm: str = "sha256",
                            chunk_size: int = 8192) -> str:
    """
    Calculate file checksum

    Args:
        file_path: Path to file
        algorithm: Hash algorithm (sha256, md5, sha1)
        chunk_size: Read chunk size

    Returns:
        Hex digest string
    """
    hash_func = hashlib.new(algorithm)

    with open(file_path, 'rb') as f:
        while chunk := f.read(chunk_size):
            hash_func.update(chunk)

    return hash_func.hexdigest()


def format_size(size: int) -> str:
    """
    Format file size in human-readable format

    Args:
        size: Size in bytes

    Returns:
        Formatted size string
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} PB"


def list_entries(directory: Path) -> List[Path]:
    """Direct children of a directory, sorted by name"""
    if not directory.is_dir():
        return []
    return sorted(directory.iterdir(), key=lambda p: p.name.lower())


def remove_path(path: Path) -> None:
    """
    Remove a file or directory tree

    Raises:
        OSError: If removal fails
    """
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def empty_directory(directory: Path) -> None:
    """Create a directory, or remove everything inside it if it exists"""
    if not directory.exists():
        directory.mkdir(parents=True)
        return

    for entry in directory.iterdir():
        remove_path(entry)


def copy_tree(src: Path, dst: Path) -> Path:
    """
    Recursively copy a directory to a destination that must not exist yet

    Raises:
        OSError: If copying fails
    """
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(src, dst)
    return dst


def move_entry(src: Path, target_dir: Path) -> Path:
    """
    Move a file or folder into a directory, replacing a same-named entry

    Args:
        src: Entry to move
        target_dir: Destination directory

    Returns:
        New location
    """
    target = target_dir / src.name
    if target.exists() or target.is_symlink():
        remove_path(target)
    shutil.move(str(src), str(target))
    return target


def merge_contents(src_dir: Path, target_dir: Path) -> List[str]:
    """
    Copy the contents of one directory into another, overwriting files

    Returns:
        Names of the merged top-level entries
    """
    target_dir.mkdir(parents=True, exist_ok=True)
    merged = []

    for entry in list_entries(src_dir):
        if entry.is_dir():
            shutil.copytree(entry, target_dir / entry.name, dirs_exist_ok=True)
        else:
            shutil.copy2(entry, target_dir / entry.name)
        merged.append(entry.name)

    return merged


def create_archive(source_dir: Path, output_file: Path) -> Path:
    """
    Zip the contents of a directory

    Args:
        source_dir: Directory whose children become the archive's top level
        output_file: Output archive path (``.zip``)

    Returns:
        Path to created archive
    """
    output_file.parent.mkdir(parents=True, exist_ok=True)

    # shutil.make_archive adds the extension itself
    base_name = str(output_file.with_suffix(''))

    archive_path = shutil.make_archive(
        base_name=base_name,
        format='zip',
        root_dir=source_dir
    )

    return Path(archive_path)


def extract_archive(archive_path: Path, extract_to: Path) -> Path:
    """
    Extract a zip archive

    Args:
        archive_path: Archive file path
        extract_to: Extraction directory

    Returns:
        Path to extracted content
    """
    extract_to.mkdir(parents=True, exist_ok=True)

    shutil.unpack_archive(
        filename=str(archive_path),
        extract_dir=str(extract_to),
        format='zip'
    )

    return extract_to


def find_files(directory: Path, name: str) -> List[Path]:
    """Find files with the given name (case-insensitive) below a directory"""
    lowered = name.lower()
    return sorted(p for p in directory.rglob("*") if p.is_file() and p.name.lower() == lowered)
