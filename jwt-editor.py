#!/usr/bin/env python3
"""
Run the JWT editor without installing it.

Usage:
    python3 jwt-editor.py decode <token>
    python3 jwt-editor.py edit --payload '{"sub": "admin"}'

This shim delegates to the jwt_editor package under src/.
"""

import os
import sys

# Ensure the src/ directory is on the Python path so the package can be found
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from jwt_editor.cli import main

if __name__ == "__main__":
    main()
