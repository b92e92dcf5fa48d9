"""Allow ``python -m user_manager``."""

from user_manager.cli.main import main

raise SystemExit(main())
