"""Pure suggestion and shopping-list pipelines."""
