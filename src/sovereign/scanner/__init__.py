"""Pattern registry, file classification, scanning and scoring."""
