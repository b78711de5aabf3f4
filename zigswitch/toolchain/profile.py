"""
Shell profile PATH setup.

When the active link directory is not on PATH, the user is offered a line in
their shell profile that adds it. A marker comment records that the offer was
made and accepted; once it is present the prompt never appears again.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Mapping, Optional

logger = logging.getLogger(__name__)

PROFILE_MARKER = "# added by zigswitch"


def path_contains(directory: Path, path_value: str) -> bool:
    """
    True if directory is one of the entries of a PATH string.

    Example:
        >>> path_contains(Path("/home/me/.zigswitch/current"), "/usr/bin:/home/me/.zigswitch/current")
        True
    """
    wanted = os.path.normpath(str(directory))
    for entry in path_value.split(os.pathsep):
        if entry and os.path.normpath(os.path.expanduser(entry)) == wanted:
            return True
    return False


def ask_yes_no(question: str) -> bool:
    """Prompt on stdin. EOF (non-interactive) counts as no."""
    try:
        response = input(f"{question} [y/N] ").strip().lower()
    except EOFError:
        print()
        return False
    return response in ("y", "yes")


class ProfileEditor:
    """
    Adds the active link directory to PATH through a shell profile.

    Example:
        >>> editor = ProfileEditor(Path("~/.bashrc").expanduser(), layout.active_link)
        >>> editor.ensure_path()
    """

    def __init__(
        self,
        profile: Path,
        link_dir: Path,
        environ: Optional[Mapping[str, str]] = None,
        prompt: Callable[[str], bool] = ask_yes_no,
    ):
        self.profile = profile
        self.link_dir = link_dir
        self.environ = os.environ if environ is None else environ
        self.prompt = prompt

    def export_line(self) -> str:
        return f'export PATH="{self.link_dir}:$PATH"'

    def on_path(self) -> bool:
        return path_contains(self.link_dir, self.environ.get("PATH", ""))

    def has_marker(self) -> bool:
        try:
            return PROFILE_MARKER in self.profile.read_text(encoding="utf-8")
        except FileNotFoundError:
            return False

    def needs_prompt(self) -> bool:
        return not self.on_path() and not self.has_marker()

    def ensure_path(self) -> bool:
        """
        Offer to add the link directory to the profile, once.

        Returns:
            True if the profile was modified
        """
        if not self.needs_prompt():
            logger.debug("PATH setup not needed")
            return False

        question = f"{self.link_dir} is not on your PATH. Add it to {self.profile}?"
        if not self.prompt(question):
            print(f"Skipped. Add {self.link_dir} to your PATH to use the active toolchain.")
            return False

        self.append_export()
        print(f"Updated {self.profile}. Restart your shell or run: {self.export_line()}")
        return True

    def append_export(self) -> None:
        """Append the marker and PATH export line to the profile."""
        self.profile.parent.mkdir(parents=True, exist_ok=True)

        existing = ""
        if self.profile.exists():
            existing = self.profile.read_text(encoding="utf-8")

        with open(self.profile, "a", encoding="utf-8") as f:
            if existing and not existing.endswith("\n"):
                f.write("\n")
            f.write(f"\n{PROFILE_MARKER}\n{self.export_line()}\n")

        logger.info(f"Appended PATH export to {self.profile}")
