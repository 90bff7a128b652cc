"""DataLathe TUI: terminal client for the DataLathe engine."""
