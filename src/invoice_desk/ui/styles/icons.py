from __future__ import annotations

from typing import Dict

import customtkinter as ctk
from PIL import Image

from invoice_desk.core.models.party import parse_hex_color

# 12x12 bitmaps; "X" is painted, anything else is transparent
_ICON_PATTERNS: dict[str, list[str]] = {
    "download": [
        ".....XX.....",
        ".....XX.....",
        ".....XX.....",
        ".....XX.....",
        "..X..XX..X..",
        "...X.XX.X...",
        "....XXXX....",
        ".....XX.....",
        "............",
        "X..........X",
        "X..........X",
        "XXXXXXXXXXXX",
    ],
    "print": [
        "...XXXXXX...",
        "...X....X...",
        "...X....X...",
        "XXXXXXXXXXXX",
        "X..........X",
        "X.......XX.X",
        "X..........X",
        "XXXXXXXXXXXX",
        "...X....X...",
        "...X....X...",
        "...XXXXXX...",
        "............",
    ],
    "payment": [
        "............",
        "XXXXXXXXXXXX",
        "X..........X",
        "XXXXXXXXXXXX",
        "XXXXXXXXXXXX",
        "X..........X",
        "X..........X",
        "X.XXX......X",
        "X..........X",
        "XXXXXXXXXXXX",
        "............",
        "............",
    ],
    "paid": [
        "............",
        "..........XX",
        ".........XX.",
        "........XX..",
        ".......XX...",
        "X.....XX....",
        "XX...XX.....",
        ".XX.XX......",
        "..XXX.......",
        "...X........",
        "............",
        "............",
    ],
    "new": [
        "............",
        ".....XX.....",
        ".....XX.....",
        ".....XX.....",
        ".....XX.....",
        ".XXXXXXXXXX.",
        ".XXXXXXXXXX.",
        ".....XX.....",
        ".....XX.....",
        ".....XX.....",
        ".....XX.....",
        "............",
    ],
    "refresh": [
        "....XXXX....",
        "..XX....XX.X",
        ".X........XX",
        ".X.......XXX",
        "X...........",
        "X...........",
        "...........X",
        "...........X",
        "XXX.......X.",
        "XX........X.",
        "X.XX....XX..",
        "....XXXX....",
    ],
}


def _build_image(pattern: list[str], color: str) -> Image.Image:
    rgb = parse_hex_color(color) or (0.0, 0.0, 0.0)
    rgba = tuple(int(round(c * 255)) for c in rgb) + (255,)
    img = Image.new("RGBA", (max(len(row) for row in pattern), len(pattern)), (0, 0, 0, 0))
    pix = img.load()
    for y, row in enumerate(pattern):
        for x, ch in enumerate(row):
            if ch == "X":
                pix[x, y] = rgba
    return img


def build_icons(color: str, size: tuple[int, int] = (14, 14)) -> Dict[str, ctk.CTkImage]:
    icons: Dict[str, ctk.CTkImage] = {}
    for name, pattern in _ICON_PATTERNS.items():
        img = _build_image(pattern, color)
        icons[name] = ctk.CTkImage(light_image=img, dark_image=img, size=size)
    return icons
