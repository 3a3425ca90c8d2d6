"""Hit tracking — endpoint registry and the coverage report built from it."""
