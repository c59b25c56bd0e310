"""Application configuration from the environment and the command line."""
