# main.py
# ────────────────────────────────────────────────────────────
# PDF region → Excel launcher
# ────────────────────────────────────────────────────────────
import customtkinter as ctk

from regionxl.logging_setup import configure_logging
logger = configure_logging()
logger.info("App starting…")

from regionxl.ui.gui import CTkDnD, RegionXlGUI   # CTkDnD ensures tkdnd is loaded
from regionxl.ui.constants import (
    INITIAL_WIDTH, INITIAL_HEIGHT,
    INITIAL_X_POSITION, INITIAL_Y_POSITION,
    MIN_APP_W, MIN_APP_H, VERSION_TEXT,
)


def main():
    # Root (DnD-enabled) hidden until the UI is built
    root = CTkDnD()
    root.withdraw()
    ctk.set_appearance_mode("dark")

    root.title("PDF to Excel " + VERSION_TEXT)
    root.geometry(f"{INITIAL_WIDTH}x{INITIAL_HEIGHT}+{INITIAL_X_POSITION}+{INITIAL_Y_POSITION}")
    root.minsize(MIN_APP_W, MIN_APP_H)

    RegionXlGUI(root)

    root.deiconify()
    root.mainloop()
    logger.info("App closed")


if __name__ == "__main__":
    main()
