"""GUI layer: landing screen, chat view, camera dialog and keypad."""
