from cfrs.cli import main

raise SystemExit(main())
