"""python -m evolution_mcp"""

from evolution_mcp.cli import main


raise SystemExit(main())
