from cgfees.cli import main

raise SystemExit(main())
