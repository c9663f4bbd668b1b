"""
Entry point for the VERIFY blog publisher.
Delegates to verify_blog.main.
"""
import sys

from verify_blog.main import cli

if __name__ == "__main__":
    sys.exit(cli())
