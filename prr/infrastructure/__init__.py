"""Infrastructure components for prr.

This layer handles external system interactions:
- GitHub API via gh CLI
- Configuration files
"""
