"""Authentication: passwords, session tokens, and the per-request auth flow.

Import from the submodules directly; ``dependencies`` pulls in the
database layer and several feature models.
"""
