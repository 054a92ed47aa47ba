from monitor_setup.display.cli import main

raise SystemExit(main())
