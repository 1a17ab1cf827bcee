"""Core engines: directory scanning, tree search, summaries and insights."""
