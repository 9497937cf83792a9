"""Grid pathfinding visualizer."""
