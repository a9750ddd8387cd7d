"""Decide the next semantic version of a GitLab CI project from merge request labels."""
