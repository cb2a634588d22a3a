# pdf_viewer.py
import logging
import tkinter as tk
import customtkinter as ctk

from regionxl.errors import RegionXlError
from regionxl.ui.constants import PAGE_TAG, RENDER_ZOOM, SELECTION_OUTLINE, SELECTION_TAG, SELECTION_WIDTH

logger = logging.getLogger(__name__)


class PDFViewer:
    """
    Scrollable canvas showing the current page. The page image is the render
    surface: selection coordinates are relative to its top-left corner and its
    pixel size is what export maps against.
    """

    def __init__(self, parent, master):
        self.parent = parent  # `parent` is the RegionXlGUI instance
        self.controller = parent.controller

        self.frame = ctk.CTkFrame(master, fg_color="transparent")
        self.canvas = ctk.CTkCanvas(self.frame, highlightthickness=0, bg="#1e1e1e")
        self.v_scrollbar = ctk.CTkScrollbar(self.frame, orientation="vertical", command=self.canvas.yview)
        self.h_scrollbar = ctk.CTkScrollbar(self.frame, orientation="horizontal", command=self.canvas.xview)
        self.canvas.configure(yscrollcommand=self.v_scrollbar.set, xscrollcommand=self.h_scrollbar.set)

        self.frame.grid_rowconfigure(0, weight=1)
        self.frame.grid_columnconfigure(0, weight=1)
        self.canvas.grid(row=0, column=0, sticky="nsew")
        self.v_scrollbar.grid(row=0, column=1, sticky="ns")
        self.h_scrollbar.grid(row=1, column=0, sticky="ew")

        self.canvas_image = None  # keeps the PhotoImage alive
        self.surface_width = 0
        self.surface_height = 0

        # Mouse events drive the selection tracker
        self.canvas.bind("<ButtonPress-1>", self.start_selection)
        self.canvas.bind("<B1-Motion>", self.drag_selection)
        self.canvas.bind("<ButtonRelease-1>", self.end_selection)
        self.canvas.bind("<Leave>", self.leave_surface)

        # Scrolling
        self.canvas.bind("<MouseWheel>", self.handle_mousewheel)
        self.canvas.bind("<Shift-MouseWheel>", self.handle_mousewheel)

    def handle_mousewheel(self, event):
        """Vertical scroll; Shift scrolls horizontally."""
        if event.state & 0x1:
            self.canvas.xview_scroll(-1 * int(event.delta / 120), "units")
        else:
            self.canvas.yview_scroll(-1 * int(event.delta / 120), "units")

    # ---------------- page drawing ----------------
    def show_current_page(self):
        """Draw the controller's current page. Raises RegionXlError on renderer failure."""
        ppm, width, height = self.controller.render_current_page(RENDER_ZOOM)
        img_tk = tk.PhotoImage(data=ppm)

        self.canvas.delete("all")
        self.canvas.create_image(0, 0, anchor=tk.NW, image=img_tk, tags=PAGE_TAG)
        self.canvas_image = img_tk
        self.surface_width, self.surface_height = width, height
        self.canvas.config(scrollregion=(0, 0, width, height))

        # selection survives page changes; redraw it over the new page
        self.draw_selection()

    def clear(self):
        self.canvas.delete("all")
        self.canvas_image = None
        self.surface_width = self.surface_height = 0

    def try_show_current_page(self):
        try:
            self.show_current_page()
        except RegionXlError as e:
            self.clear()
            self.parent.notify_error(e)

    # ---------------- selection ----------------
    def _surface_point(self, event):
        # canvas coords == page-image coords since the image sits at (0, 0)
        return self.canvas.canvasx(event.x), self.canvas.canvasy(event.y)

    def start_selection(self, event):
        if self.canvas_image is None:
            return
        x, y = self._surface_point(event)
        self.controller.selection.pointer_down(x, y)
        self.draw_selection()
        self.parent.update_controls()

    def drag_selection(self, event):
        if not self.controller.selection.is_selecting:
            return
        x, y = self._surface_point(event)
        self.controller.selection.pointer_move(x, y)
        self.draw_selection()

    def end_selection(self, event=None):
        if not self.controller.selection.is_selecting:
            return
        rect = self.controller.selection.pointer_up()
        logger.debug("Selection on surface: %s", rect)
        self.parent.update_controls()

    def leave_surface(self, event=None):
        if not self.controller.selection.is_selecting:
            return
        self.controller.selection.pointer_leave()
        self.parent.update_controls()

    def draw_selection(self):
        self.canvas.delete(SELECTION_TAG)
        rect = self.controller.selection.rect
        if rect is None:
            return
        self.canvas.create_rectangle(
            rect.x, rect.y, rect.x + rect.width, rect.y + rect.height,
            outline=SELECTION_OUTLINE, width=SELECTION_WIDTH, tags=SELECTION_TAG,
        )
