import os
import subprocess

from pathlib import Path

def edit_file(path: Path) -> bool:
    """
    Open a file in the user's preferred editor and check if it was modified.
    If the file was modified, return True. Otherwise, return False.
    """
    editor = os.getenv("EDITOR", "vim") # Default to vim if $EDITOR is not set

    pre_edit = path.read_text()

    subprocess.run([editor, str(path)], check=True)

    post_edit = path.read_text()

    # Editors like vim append a trailing newline on save; only report
    # semantic changes.
    return pre_edit.strip() != post_edit.strip()
