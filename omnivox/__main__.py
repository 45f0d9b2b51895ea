"""
Package entry point.

Allows running the application via:

    python -m omnivox <institution> <student_number> <password>

This simply forwards execution to omnivox.cli.main().
"""

from omnivox.cli import main

if __name__ == "__main__":
    main()
