"""Configuration, reporting and progress helpers shared by rxren."""
