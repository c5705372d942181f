"""Browser automation session for an editor-embedded coding agent."""
