"""Local git branch cleanup tool.

Features:
- Detect the repository's main branch from the remote (or take it from --head)
- Refuse to run unless the main branch is checked out
- Delete local branches whose remote counterpart is gone
- Dry run mode to preview deletions
- Force option for unmerged branches
"""

__version__ = "0.1.0"
