"""Feature modules of the git-editor proxy API.

Each module contributes one router factory plus its request schemas and,
where upstream calls need sequencing or reshaping, a service class.
"""
