"""Allow ``python -m blog_search``."""

from blog_search.cli import main


raise SystemExit(main())
