"""Result classification and rendering."""
