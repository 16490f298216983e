"""
Filesystem operations used when deploying dotfiles.

Copies overwrite in place: existing destination files are replaced,
entries that only exist at the destination are left alone. Symlinks
inside a copied tree are recreated as links, not followed, and replace
whatever link or file was at their destination.
"""

import filecmp
import os
import shutil
from typing import Iterator, Union

PathLike = Union[str, os.PathLike]


def makedirs(path: PathLike, exist_ok: bool = True) -> None:
    """Create directory and all parent directories."""
    os.makedirs(str(path), exist_ok=exist_ok)


def _clear_for_entry(dst: str) -> None:
    """Remove a link at dst; refuse to replace a real directory with a file."""
    if os.path.islink(dst):
        os.remove(dst)
    elif os.path.isdir(dst):
        raise IsADirectoryError(f"Destination is a directory: {dst}")


def _ensure_dir(path: str) -> None:
    if os.path.islink(path) or (os.path.exists(path) and not os.path.isdir(path)):
        os.remove(path)
    makedirs(path)


def _copy_entry(src: str, dst: str) -> None:
    _clear_for_entry(dst)
    if os.path.islink(src):
        os.symlink(os.readlink(src), dst)
    else:
        shutil.copy2(src, dst)


def copy_file(src: PathLike, dst: PathLike) -> None:
    """Copy a file's content over dst, preserving metadata where possible.

    A link at dst is written through, like ``cp`` does.
    """
    parent = os.path.dirname(str(dst))
    if parent:
        makedirs(parent)
    if os.path.isdir(str(dst)):
        raise IsADirectoryError(f"Destination is a directory: {dst}")
    shutil.copy2(str(src), str(dst))


def copy_tree(src: PathLike, dst: PathLike) -> None:
    """Recursively copy src into dst, merging into an existing dst."""
    src_root, dst_root = str(src), str(dst)
    _ensure_dir(dst_root)

    for dirpath, dirnames, filenames in os.walk(src_root):
        rel = os.path.relpath(dirpath, src_root)
        target = dst_root if rel == os.curdir else os.path.join(dst_root, rel)

        linked_dirs = [d for d in dirnames if os.path.islink(os.path.join(dirpath, d))]
        dirnames[:] = [d for d in dirnames if d not in linked_dirs]

        for name in dirnames:
            _ensure_dir(os.path.join(target, name))
        for name in filenames + linked_dirs:
            _copy_entry(os.path.join(dirpath, name), os.path.join(target, name))


def walk_files(root: PathLike) -> Iterator[str]:
    """Yield paths of files and symlinks under root, relative to root."""
    root_str = str(root)
    for dirpath, dirnames, filenames in os.walk(root_str):
        linked_dirs = [d for d in dirnames if os.path.islink(os.path.join(dirpath, d))]
        for name in filenames + linked_dirs:
            yield os.path.relpath(os.path.join(dirpath, name), root_str)


def files_match(src: PathLike, dst: PathLike) -> bool:
    """Check that dst exists and has the same bytes as src."""
    if not os.path.isfile(str(dst)):
        return False
    return filecmp.cmp(str(src), str(dst), shallow=False)


def entries_match(src: PathLike, dst: PathLike) -> bool:
    """Links match when they point at the same target, files by content."""
    if os.path.islink(str(src)):
        return os.path.islink(str(dst)) and os.readlink(str(src)) == os.readlink(str(dst))
    return files_match(src, dst)


def tree_matches(src: PathLike, dst: PathLike) -> bool:
    """
    Check that every entry under src exists under dst unchanged.

    Extra files under dst do not count as a mismatch.
    """
    if os.path.islink(str(dst)) or not os.path.isdir(str(dst)):
        return False
    for rel in walk_files(src):
        if not entries_match(os.path.join(str(src), rel), os.path.join(str(dst), rel)):
            return False
    return True
