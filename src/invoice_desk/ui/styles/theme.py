import tkinter as tk
from tkinter import ttk
from typing import Dict

import customtkinter as ctk

THEMES: Dict[str, dict] = {
    "light": {
        "bg": "#f8fafc",
        "surface": "#ffffff",
        "panel": "#f1f5f9",
        "muted": "#64748b",
        "text": "#0f172a",
        "accent": "#0f172a",
        "accent_dim": "#1e293b",
        "border": "#e2e8f0",
        "highlight": "#e2e8f0",
        "danger": "#dc2626",
        "success": "#16a34a",
    },
    "dark": {
        "bg": "#0b111a",
        "surface": "#121a26",
        "panel": "#1b2433",
        "muted": "#94a3b8",
        "text": "#f1f5f9",
        "accent": "#3b82f6",
        "accent_dim": "#2563eb",
        "border": "#243040",
        "highlight": "#1a2230",
        "danger": "#f87171",
        "success": "#4ade80",
    },
}

ACTIVE_THEME = "light"
PALETTE = THEMES[ACTIVE_THEME]


def apply_theme(root: tk.Misc, name: str = "light") -> dict:
    global ACTIVE_THEME, PALETTE
    if name not in THEMES:
        name = "light"
    ACTIVE_THEME = name
    PALETTE = THEMES[name]

    appearance = "Light" if name == "light" else "Dark"
    ctk.set_appearance_mode(appearance)
    ctk.set_default_color_theme("blue")
    root.configure(fg_color=PALETTE["bg"])

    style = ttk.Style(root)
    style.theme_use("clam")

    base_font = ("Segoe UI", 10)
    style.configure("TFrame", background=PALETTE["bg"])
    style.configure("TLabel", background=PALETTE["bg"], foreground=PALETTE["text"], font=base_font)
    style.configure(
        "Treeview",
        background=PALETTE["surface"],
        fieldbackground=PALETTE["surface"],
        foreground=PALETTE["text"],
        bordercolor=PALETTE["border"],
        rowheight=26,
        font=base_font,
    )
    selected_fg = "#ffffff" if name == "light" else PALETTE["text"]
    style.map(
        "Treeview",
        background=[("selected", PALETTE["accent_dim"])],
        foreground=[("selected", selected_fg)],
    )
    style.configure(
        "Treeview.Heading",
        background=PALETTE["panel"],
        foreground=PALETTE["text"],
        bordercolor=PALETTE["border"],
        relief="flat",
        font=("Segoe UI", 10, "bold"),
    )
    style.map("Treeview.Heading", background=[("active", PALETTE["highlight"])])
    return PALETTE


def style_combo_box(combo: ctk.CTkComboBox, palette: dict) -> None:
    combo.configure(
        fg_color=palette["surface"],
        border_color=palette["border"],
        button_color=palette["accent"],
        button_hover_color=palette["accent_dim"],
        text_color=palette["text"],
        dropdown_fg_color=palette["surface"],
        dropdown_text_color=palette["text"],
        dropdown_hover_color=palette["highlight"],
    )


def accent_button_kwargs(palette: dict) -> dict:
    return {
        "fg_color": palette["accent"],
        "hover_color": palette["accent_dim"],
        "text_color": "#ffffff",
    }
