"""userkit command line interface."""
