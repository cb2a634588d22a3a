# regionxl/ui/ui_utils.py
import re
import customtkinter as ctk
from CTkToolTip import CTkToolTip

from regionxl.domain.models import Notification
from regionxl.ui.constants import (
    BUTTON_FONT, TOAST_BG, TOAST_BORDER_DEFAULT, TOAST_BORDER_ERROR, TOAST_MS, TOAST_WIDTH,
)


def create_tooltip(widget, message, delay=0.3,
                   font=("Verdana", 9),
                   border_width=1,
                   border_color="gray50",
                   corner_radius=6,
                   justify="left"):
    return CTkToolTip(
        widget,
        delay=delay,
        justify=justify,
        font=font,
        border_width=border_width,
        border_color=border_color,
        corner_radius=corner_radius,
        message=message,
    )


def show_toast(master, note: Notification, duration_ms: int = TOAST_MS):
    """Borderless toast in the bottom-right corner of master; dismisses itself."""
    toast = ctk.CTkToplevel(master)
    toast.overrideredirect(True)
    try:
        toast.attributes("-topmost", True)
    except Exception:
        pass

    frame = ctk.CTkFrame(
        toast, fg_color=TOAST_BG, corner_radius=8, border_width=2,
        border_color=TOAST_BORDER_ERROR if note.is_error else TOAST_BORDER_DEFAULT,
    )
    frame.pack(fill="both", expand=True)

    ctk.CTkLabel(frame, text=note.title, font=(BUTTON_FONT, 11, "bold"),
                 anchor="w", justify="left").pack(fill="x", padx=12, pady=(10, 0))
    ctk.CTkLabel(frame, text=note.description, font=(BUTTON_FONT, 9),
                 anchor="w", justify="left", wraplength=TOAST_WIDTH - 24).pack(fill="x", padx=12, pady=(2, 10))

    master.update_idletasks()
    toast.update_idletasks()
    x = master.winfo_rootx() + master.winfo_width() - TOAST_WIDTH - 20
    y = master.winfo_rooty() + master.winfo_height() - toast.winfo_reqheight() - 20
    toast.geometry(f"{TOAST_WIDTH}x{toast.winfo_reqheight()}+{max(x, 0)}+{max(y, 0)}")

    # click to dismiss early
    for w in (toast, frame):
        w.bind("<Button-1>", lambda e: _destroy(toast))
    toast.after(duration_ms, lambda: _destroy(toast))
    return toast


def _destroy(widget):
    if widget.winfo_exists():
        widget.destroy()


def parse_drop_paths(raw_data: str) -> list:
    """tkdnd hands over '{path with spaces} plain_path'; split it into paths."""
    raw = raw_data.strip()
    braced = re.findall(r"{(.*?)}", raw)
    rest = re.sub(r"{.*?}", " ", raw).split()
    return [p.strip('"') for p in braced + rest if p.strip('"')]
