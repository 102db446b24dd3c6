"""Exercise attempt and topic completion tracker for the JavaScript tutor."""
