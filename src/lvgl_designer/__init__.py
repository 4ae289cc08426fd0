"""Non-destructive editor engine for ESPHome LVGL display configurations."""

__version__ = "0.1.0"
