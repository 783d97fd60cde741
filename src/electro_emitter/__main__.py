"""Allow running as ``python -m electro_emitter``."""

from .cli import main

if __name__ == "__main__":
    main()
