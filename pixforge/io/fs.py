import errno
import os
import re
import shutil
from pathlib import Path
from typing import Union

_TEMP_RE = re.compile(r"(.+?)(\.\w+)$")


def silent_remove(file_path: Union[str, Path]) -> None:
    """
    Remove file which may not exist.

    :param file_path: File path.
    :type file_path: str
    :returns: None
    :rtype: :class:`NoneType`
    :Usage example:

     .. code-block:: python

        from pixforge.io.fs import silent_remove
        silent_remove('/var/www/cache/photo__w320h240_1a2b3c_temp.jpg')
    """
    try:
        os.remove(file_path)
    except OSError as e:
        if e.errno != errno.ENOENT:  # errno.ENOENT = no such file or directory
            raise


def get_file_ext(path: str) -> str:
    """
    Extracts file extension from a given path.

    :param path: Path to file.
    :type path: str
    :returns: File extension without name
    :rtype: :class:`str`
    :Usage example:

     .. code-block::

        from pixforge.io.fs import get_file_ext

        print(get_file_ext("/var/www/img/photo.jpeg"))
        # Output: .jpeg
    """
    return os.path.splitext(os.path.basename(path))[1]


def temp_path_for(target_path: str, suffix: str = "_temp") -> str:
    """
    Sibling path used to stage a derivative before it is committed.

    ``/cache/photo.jpg`` becomes ``/cache/photo_temp.jpg``. A path without an
    extension gets the suffix appended.
    """
    match = _TEMP_RE.match(str(target_path))
    if match is None:
        return f"{target_path}{suffix}"
    return f"{match.group(1)}{suffix}{match.group(2)}"


def copy_file(src: str, dst: str) -> None:
    """Copy ``src`` to ``dst``, creating the destination directory."""
    Path(dst).parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dst)


def rename_file(src: str, dst: str) -> None:
    """Atomically move ``src`` over ``dst`` (same filesystem)."""
    os.replace(src, dst)
