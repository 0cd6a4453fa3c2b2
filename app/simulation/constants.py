"""
constants.py - Centralized constants for the simulation engine.

This file is the SINGLE SOURCE OF TRUTH for:
- TICK_INTERVAL: Logic beat for sequential (clocked) part updates
- BUTTON_HOLD: How long a timed button stays on after a press
- FRAME_INTERVAL_MS: Cadence of the step driver
- DUPLICATE_OFFSET: Displacement applied to duplicated parts

All times are in seconds unless the name says otherwise.
"""

# Logic clock
TICK_INTERVAL = 1.0            # Seconds between sequential updates

# Timed button
BUTTON_HOLD = 1.0              # Seconds a pressed button stays energized

# Step driver
FRAME_INTERVAL_MS = 16         # Milliseconds between simulation steps (~60 Hz)

# Editing
DUPLICATE_OFFSET = 44.0        # One grid step, applied on x and y
