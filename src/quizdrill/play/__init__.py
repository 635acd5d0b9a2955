"""Play, check and mode-listing commands for quizdrill drills."""
