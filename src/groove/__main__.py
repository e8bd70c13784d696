"""Entry point for running the CLI as a module.

Usage:
    python -m groove conversation list
    python -m groove --help
"""

from dotenv import load_dotenv

load_dotenv()  # GROOVEHQ_API_TOKEN may live in .env

from groove.cli import main  # noqa: E402

if __name__ == "__main__":
    main()
