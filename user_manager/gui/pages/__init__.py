"""pages — the panels hosted by MainWindow."""
