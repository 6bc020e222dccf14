# view/constants.py
# Shared view-level constants for the curve editor's look

PLOT_BG = "white"           # plot background
CURVE_COLOR = "#1f4e9c"     # chain outline
CURVE_WIDTH = 2
ANCHOR_COLOR = "#222222"    # anchor handles (squares)
CONTROL_COLOR = "#e07b00"   # control handles (circles)
HANDLE_ARM_COLOR = "#b0b0b0"
MARKER_COLOR = "#d62728"    # hover/drag marker ring
