"""formforge command-line interface."""
