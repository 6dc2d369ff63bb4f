from metricgen.cli import main

raise SystemExit(main())
