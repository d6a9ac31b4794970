"""Branch naming convention tool.

Features:
- Parse branch names like 220622f-new-feature into date, type and description
- Classify branches as release, feature or bug fix
- Find parent and child branches from the --separator convention
- List branches with the current branch first
- List tags, optionally only semantic versions sorted newest first
"""

__version__ = "0.1.0"
