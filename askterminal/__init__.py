"""AskTerminal: terminal output interpretation for a shell-tutoring app."""
