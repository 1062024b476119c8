"""Game themes.

Each supported game gets a label and an accent colour. Unknown ids still
render: they get an upper-cased label and the app's global accent.
"""

from __future__ import annotations

from survivalfox.models import GameTheme

DEFAULT_GAME_ID = "valheim"
DEFAULT_ACCENT = "#6FA9C7"

GAME_THEMES: dict[str, GameTheme] = {
    "valheim": GameTheme(id="valheim", label="VALHEIM", accent="#4A5B4F"),
    "starrupture": GameTheme(id="starrupture", label="STAR RUPTURE", accent="#3B4D9A"),
}


def normalize_game_id(game_id: str | None) -> str:
    return (game_id or "").strip().lower()


def get_theme(game_id: str | None) -> GameTheme:
    key = normalize_game_id(game_id)
    theme = GAME_THEMES.get(key)
    if theme is not None:
        return theme
    return GameTheme(
        id=key or "game",
        label=(game_id if game_id is not None else "SPIEL").upper(),
        accent=DEFAULT_ACCENT,
    )
