"""Document model, syntax tree and the builder that turns one into the other."""
