"""OSC-8 hyperlinks for paths and URLs printed by the DATASTASH CLI."""

import os
import sys
from typing import TextIO

_OSC8_TERMINALS = {"apple_terminal", "vscode", "iterm.app", "wezterm", "kitty"}


def supports_osc8(stream: TextIO | None = None) -> bool:
    """Best-effort check whether `stream` (default stdout) renders OSC-8 links.

    Piped or redirected streams never do. Otherwise a small allowlist of
    terminal identifiers is consulted.
    """
    stream = stream or sys.stdout
    if not getattr(stream, "isatty", lambda: False)():
        return False
    terminal_program = (os.getenv("TERM_PROGRAM") or "").lower()
    return bool(
        terminal_program in _OSC8_TERMINALS
        or os.getenv("WT_SESSION")  # Windows Terminal
        or os.getenv("VTE_VERSION")  # GNOME Terminal, Tilix, etc.
        or os.getenv("TERM", "").startswith(("alacritty", "konsole"))
    )


def hyperlink(url: str, label: str | None = None) -> str:
    """Render `url` as a clickable link, or as plain text when unsupported.

    Args:
        url: Target URL.
        label: Text shown for the link; defaults to the URL itself. When
            hyperlinks are unsupported the label is returned as plain text.
    """
    if not supports_osc8():
        return label or url
    return f"\x1b]8;;{url}\x07{label or url}\x1b]8;;\x07"  # OSC 8 ; ; URL BEL
