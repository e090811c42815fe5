"""pokvault command-line interface."""
