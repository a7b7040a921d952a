"""Allow ``python -m phrasedecl``."""

from phrasedecl.main import main

if __name__ == "__main__":
    raise SystemExit(main())
