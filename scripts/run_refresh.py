#!/usr/bin/env python3
"""
Refresh index.html with the current sprint's numbers
Requires AZURE_DEVOPS_PAT (environment or .env)
"""
import sys
import os

# Add the project directory to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sprint_refresh.cli import main

if __name__ == "__main__":
    sys.exit(main())
