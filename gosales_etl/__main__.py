from gosales_etl.cli import main

raise SystemExit(main())
