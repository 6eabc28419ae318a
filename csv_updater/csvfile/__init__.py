"""CSV input parsing and result report rendering."""
