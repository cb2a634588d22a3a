# constants.py

VERSION_TEXT = "0.1.261019"

# ───────── Geometry ─────────
INITIAL_WIDTH = 1100
GOLDEN_RATIO = (1 + 5 ** 0.5) / 2
INITIAL_HEIGHT = int(INITIAL_WIDTH / GOLDEN_RATIO)  # Tk wants ints
INITIAL_X_POSITION = 100
INITIAL_Y_POSITION = 100
MIN_APP_W = 760
MIN_APP_H = 540

# Sidebar
SIDEBAR_WIDTH = 260
SIDEBAR_PADDING = 10

# The page is always drawn 1:1; mapping only uses the surface/viewport ratio
RENDER_ZOOM = 1.0

BUTTON_FONT = "Verdana"

# Selection overlay
SELECTION_OUTLINE = "#3B82F6"
SELECTION_WIDTH = 2
SELECTION_TAG = "selection"
PAGE_TAG = "pdf_image"

# Drop card
DROP_BORDER = "#C10206"
DROP_BG_HOVER = "gray40"
DROP_BG_DEFAULT = "#212121"

# Toasts
TOAST_MS = 3500
TOAST_WIDTH = 320
TOAST_BG = "#2b2b2b"
TOAST_BORDER_DEFAULT = "gray50"
TOAST_BORDER_ERROR = "#C10206"

