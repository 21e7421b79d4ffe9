"""
restmap CLI - inspect and exercise controllers from the shell.

Usage:
    restmap routes myapp.controllers:UsersController
    restmap docs myapp.controllers:UsersController --format yaml
    restmap invoke myapp.controllers:UsersController fetch --params '{"id": 5}'
"""

__cli_name__ = "restmap"
