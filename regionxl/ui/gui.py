# gui.py
import logging
import customtkinter as ctk
from pathlib import Path
from tkinter import filedialog

from regionxl.controllers.extract_controller import ExtractController, notification_for
from regionxl.domain.models import Notification
from regionxl.errors import RegionXlError
from regionxl.ui.constants import (
    BUTTON_FONT, DROP_BG_DEFAULT, DROP_BG_HOVER, DROP_BORDER, SIDEBAR_PADDING, SIDEBAR_WIDTH,
)
from regionxl.ui.pdf_viewer import PDFViewer
from regionxl.ui.ui_utils import create_tooltip, parse_drop_paths, show_toast

logger = logging.getLogger(__name__)

# DnD (safe import)
try:
    from tkinterdnd2 import TkinterDnD, DND_FILES
    DND_ENABLED = True
except Exception as e:
    logger.warning("tkdnd not available, drag & drop disabled: %s", e)
    TkinterDnD = None
    DND_FILES = None
    DND_ENABLED = False

class CTkDnD(ctk.CTk, *( (TkinterDnD.DnDWrapper,) if DND_ENABLED else tuple() )):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if DND_ENABLED:
            self.TkdndVersion = TkinterDnD._require(self)


class RegionXlGUI:
    def __init__(self, root, controller: ExtractController = None):
        self.root = root
        # the controller opens the registry session; _on_app_close ends it
        self.controller = controller or ExtractController()

        self.setup_widgets()
        self.pdf_viewer = PDFViewer(self, self.viewer_host)
        self.pdf_viewer.frame.pack(fill="both", expand=True)
        self.setup_tooltips()
        self.update_controls()
        self.root.protocol("WM_DELETE_WINDOW", self._on_app_close)

    def _on_app_close(self):
        try:
            self.controller.close()
        except Exception:
            logger.exception("Cleanup on close failed")
        self.root.destroy()

    # ---------------- layout ----------------
    def setup_widgets(self):
        self.sidebar = ctk.CTkFrame(self.root, width=SIDEBAR_WIDTH)
        self.sidebar.pack(side="left", fill="y", padx=SIDEBAR_PADDING, pady=10)
        self.sidebar.pack_propagate(False)

        self.viewer_host = ctk.CTkFrame(self.root, fg_color="transparent")
        self.viewer_host.pack(side="left", fill="both", expand=True, padx=(0, SIDEBAR_PADDING), pady=10)

        ctk.CTkLabel(self.sidebar, text="PDF to Excel", font=(BUTTON_FONT, 14, "bold")).pack(pady=(12, 8))

        # --- Drop card ---
        self.drop_card = ctk.CTkFrame(
            self.sidebar, fg_color="transparent",
            border_width=2, border_color=DROP_BORDER,
            corner_radius=8, width=220, height=110
        )
        self.drop_card.pack_propagate(False)
        self.drop_card.pack(pady=(4, 6))

        self._drop_wrap = ctk.CTkFrame(self.drop_card, fg_color="transparent")
        self._drop_wrap.place(relx=0.5, rely=0.5, anchor="center")
        self.drop_title = ctk.CTkLabel(self._drop_wrap, text="DRAG & DROP", text_color="#B5B5B5",
                                       font=("Arial Black", 16), justify="center")
        self.drop_title.pack(anchor="center")
        self.drop_sub = ctk.CTkLabel(self._drop_wrap, text="Drop a PDF\nor Click to Browse",
                                     font=(BUTTON_FONT, 10), text_color="#B5B5B5", justify="center")
        self.drop_sub.pack(anchor="center", pady=(2, 0))

        for w in (self.drop_card, self._drop_wrap, self.drop_title, self.drop_sub):
            w.bind("<Button-1>", lambda e: self.browse_pdf())
            w.bind("<Enter>", lambda e: self.drop_card.configure(fg_color=DROP_BG_HOVER))
            w.bind("<Leave>", lambda e: self.drop_card.configure(fg_color=DROP_BG_DEFAULT))

        if DND_ENABLED:
            try:
                self.drop_card.drop_target_register(DND_FILES)
                self.drop_card.dnd_bind("<<Drop>>", self.drop_pdf)
            except Exception as e:
                logger.warning("Could not enable DnD on drop card: %s", e)

        self.file_label = ctk.CTkLabel(self.sidebar, text="No file selected", font=(BUTTON_FONT, 9),
                                       wraplength=SIDEBAR_WIDTH - 30)
        self.file_label.pack(pady=(0, 10))

        # --- Page navigation ---
        nav = ctk.CTkFrame(self.sidebar, fg_color="transparent")
        nav.pack(fill="x", padx=10, pady=4)
        self.prev_button = ctk.CTkButton(nav, text="Previous", width=70, command=self.previous_page)
        self.prev_button.pack(side="left")
        self.next_button = ctk.CTkButton(nav, text="Next", width=70, command=self.next_page)
        self.next_button.pack(side="right")
        self.page_label = ctk.CTkLabel(nav, text="", font=(BUTTON_FONT, 10))
        self.page_label.pack(side="left", expand=True)

        # --- Output folder ---
        ctk.CTkLabel(self.sidebar, text="Output folder", font=(BUTTON_FONT, 9)).pack(anchor="w", padx=12, pady=(16, 0))
        out_row = ctk.CTkFrame(self.sidebar, fg_color="transparent")
        out_row.pack(fill="x", padx=10)
        self.output_entry = ctk.CTkEntry(out_row, height=24, font=(BUTTON_FONT, 9), border_width=1, corner_radius=3)
        self.output_entry.insert(0, str(self.controller.output_dir))
        self.output_entry.pack(side="left", fill="x", expand=True)
        self.output_entry.bind("<KeyRelease>", self.update_output_dir)
        self.output_button = ctk.CTkButton(out_row, text="…", width=28, height=24, command=self.browse_output_dir)
        self.output_button.pack(side="left", padx=(4, 0))

        # --- Export ---
        self.export_button = ctk.CTkButton(
            self.sidebar, text="Export to Excel", height=34,
            fg_color="#16A34A", hover_color="#15803D",
            font=(BUTTON_FONT, 11, "bold"), command=self.export_selection
        )
        self.export_button.pack(fill="x", padx=10, pady=(18, 6))

    def setup_tooltips(self):
        create_tooltip(self.drop_card, "Drop a PDF here or click to choose one")
        create_tooltip(self.output_entry, "Folder where extracted_data.xlsx is saved")
        create_tooltip(self.export_button, "Export the text inside the selected area")

    def update_controls(self):
        doc = self.controller.document
        if doc is None:
            self.page_label.configure(text="")
            self.prev_button.configure(state="disabled")
            self.next_button.configure(state="disabled")
        else:
            self.page_label.configure(text=f"Page {doc.current_page} of {doc.page_count}")
            self.prev_button.configure(state="normal" if doc.current_page > 1 else "disabled")
            self.next_button.configure(state="normal" if doc.current_page < doc.page_count else "disabled")

        if self.controller.exporting:
            self.export_button.configure(text="Exporting...", state="disabled")
        else:
            self.export_button.configure(text="Export to Excel",
                                         state="normal" if self.controller.can_export else "disabled")

    # ---------------- notifications ----------------
    def notify(self, note: Notification):
        show_toast(self.root, note)

    def notify_error(self, exc: RegionXlError):
        self.notify(notification_for(exc))

    # ---------------- intake ----------------
    def browse_pdf(self):
        pdf_path = filedialog.askopenfilename(filetypes=[("PDF files", "*.pdf"), ("All files", "*.*")])
        if pdf_path:
            self.open_pdf(pdf_path)

    def drop_pdf(self, event):
        paths = parse_drop_paths(event.data)
        if paths:
            self.open_pdf(paths[0])

    def open_pdf(self, path):
        note = self.controller.open_path(path)
        if not note.is_error:
            self.file_label.configure(text=f"Selected file: {self.controller.upload.name}")
            self.pdf_viewer.try_show_current_page()
        self.update_controls()
        self.notify(note)

    # ---------------- navigation ----------------
    def previous_page(self):
        if self.controller.previous_page():
            self.pdf_viewer.try_show_current_page()
        self.update_controls()

    def next_page(self):
        if self.controller.next_page():
            self.pdf_viewer.try_show_current_page()
        self.update_controls()

    # ---------------- output ----------------
    def browse_output_dir(self):
        folder = filedialog.askdirectory(initialdir=str(self.controller.output_dir))
        if folder:
            self.output_entry.delete(0, ctk.END)
            self.output_entry.insert(0, folder)
            self.update_output_dir()

    def update_output_dir(self, event=None):
        value = self.output_entry.get().strip()
        if value:
            self.controller.output_dir = Path(value)

    # ---------------- export ----------------
    def export_selection(self):
        self.controller.exporting = True
        self.update_controls()
        self.root.update_idletasks()

        note = self.controller.export(self.pdf_viewer.surface_width, self.pdf_viewer.surface_height)
        self.update_controls()
        self.notify(note)
