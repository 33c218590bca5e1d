"""Navigation tree model, normalization and flattening."""
