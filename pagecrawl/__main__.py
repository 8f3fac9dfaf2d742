"""
Main entry point for the pagecrawl package.

Allows running the crawler as: python -m pagecrawl
"""

from pagecrawl.cli import main

if __name__ == "__main__":
    main()
