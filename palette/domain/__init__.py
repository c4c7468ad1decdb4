"""Pure domain rules (diary lifecycle, invitation codes)."""
