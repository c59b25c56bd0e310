"""GitHub source control collaborator."""
