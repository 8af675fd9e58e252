"""Template parsing, literal rendering and statement binding."""
