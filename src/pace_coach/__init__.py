"""Track pace coach — stopwatch, lap capture and training series engine."""
