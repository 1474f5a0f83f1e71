"""
Top-level entry point: python -m jwt_editor <command>
"""

from .cli import main

if __name__ == "__main__":
    main()
