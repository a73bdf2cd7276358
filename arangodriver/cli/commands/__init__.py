"""Command implementations for arangoctl; each returns a CLIResponse."""
