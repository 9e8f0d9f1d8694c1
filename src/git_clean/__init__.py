"""git-clean CLI.

Deletes local git branches whose GitHub pull requests have all been closed.
See `git-clean --help` for details.
"""
