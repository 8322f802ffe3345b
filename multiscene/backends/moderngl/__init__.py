"""ModernGL backend: shader program management and surface rendering."""
